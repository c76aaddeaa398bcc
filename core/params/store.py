"""
Parameter Store

Opaque configuration for the tree hash function and for the zk verifying
material, mutable only through an authorized command.

Owner: Protocol/Crypto Engineer

Bytes are never interpreted here; the configured hasher and verifier
backends give them meaning. Both handles returned by the store read the
stored bytes on every call, so a rotation takes effect for the very next
hash or verification.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.auth import Action, Authorizer, require
from core.crypto.hasher import HasherFactory, Sha256Hasher
from core.crypto.verifier import DigestVerifier, Verifier
from core.receipts.recorder import EventRecorder
from core.schemas.element import ensure_element
from core.schemas.errors import InvalidParametersException, NotInitializedException

logger = logging.getLogger(__name__)

ArityKey = tuple[int, int]


class StoreHasher:
    """Hasher handle bound to a store; resolves parameters per call."""

    def __init__(self, store: ParameterStore) -> None:
        self._store = store

    def hash_two(self, left: bytes, right: bytes) -> bytes:
        return self._store._build_hasher().hash_two(left, right)


class StoreVerifier:
    """Verifier handle bound to one arity key; resolves the key per call."""

    def __init__(self, store: ParameterStore, arity: ArityKey) -> None:
        self._store = store
        self.arity = arity

    def verify(self, public_inputs: bytes, proof: bytes) -> bool:
        key = self._store._require_material(self.arity)
        return self._store.verifier_backend.verify(public_inputs, proof, key)


class ParameterStore:
    """
    Hash parameters, verifying material keyed by arity, and the maintainer.

    Example:
        >>> store = ParameterStore()
        >>> store.set_hash_parameters(b"params", authorize=allow_all)
        >>> hasher = store.get_hasher()
    """

    def __init__(
        self,
        *,
        hasher_factory: HasherFactory = Sha256Hasher,
        verifier_backend: Optional[Verifier] = None,
        maintainer: Optional[bytes] = None,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.hasher_factory = hasher_factory
        self.verifier_backend: Verifier = verifier_backend or DigestVerifier()
        self.maintainer = ensure_element(maintainer, "maintainer") if maintainer else None
        self.recorder = recorder or EventRecorder()
        self._hash_parameters: Optional[bytes] = None
        self._verifying_material: dict[ArityKey, bytes] = {}

    # -- hash parameters ------------------------------------------------------

    @property
    def hash_parameters(self) -> Optional[bytes]:
        return self._hash_parameters

    def set_hash_parameters(self, parameters: bytes, *, authorize: Authorizer) -> None:
        """
        Replace the hash parameters wholesale.

        Raises:
            UnauthorizedException: If the predicate refuses the action
            InvalidParametersException: If parameters are empty
        """
        require(authorize, Action.SET_HASH_PARAMETERS)
        if not parameters:
            raise InvalidParametersException("Hash parameters must not be empty")
        self._hash_parameters = bytes(parameters)
        logger.info(f"Hash parameters set ({len(parameters)} bytes)")
        self.recorder.record("hash_parameters_set", length=len(parameters))

    def get_hasher(self) -> StoreHasher:
        """
        Raises:
            NotInitializedException: If hash parameters were never set
        """
        self._build_hasher()
        return StoreHasher(self)

    def _build_hasher(self):
        if self._hash_parameters is None:
            raise NotInitializedException("Hash parameters")
        return self.hasher_factory(self._hash_parameters)

    # -- verifying material ---------------------------------------------------

    def set_verifying_material(
        self,
        arity: ArityKey,
        material: bytes,
        *,
        authorize: Authorizer,
    ) -> None:
        """
        Replace the verifying material for one arity key.

        Raises:
            UnauthorizedException: If the predicate refuses the action
            InvalidParametersException: If material is empty or the key malformed
        """
        require(authorize, Action.SET_VERIFYING_MATERIAL)
        arity = _check_arity(arity)
        if not material:
            raise InvalidParametersException(
                f"Verifying material for {arity} must not be empty",
                details={"arity": list(arity)},
            )
        self._verifying_material[arity] = bytes(material)
        logger.info(f"Verifying material set for arity {arity} ({len(material)} bytes)")
        self.recorder.record(
            "verifying_material_set", arity=list(arity), length=len(material)
        )

    def has_verifying_material(self, arity: ArityKey) -> bool:
        return tuple(arity) in self._verifying_material

    def get_verifier(self, arity: ArityKey) -> StoreVerifier:
        """
        Raises:
            NotInitializedException: If no material exists for this arity
        """
        arity = _check_arity(arity)
        self._require_material(arity)
        return StoreVerifier(self, arity)

    def verify(self, arity: ArityKey, public_inputs: bytes, proof: bytes) -> bool:
        return self.get_verifier(arity).verify(public_inputs, proof)

    def _require_material(self, arity: ArityKey) -> bytes:
        material = self._verifying_material.get(arity)
        if material is None:
            raise NotInitializedException(
                f"Verifying material for arity {arity}",
                details={"arity": list(arity)},
            )
        return material

    # -- maintainer -----------------------------------------------------------

    def set_maintainer(self, new_maintainer: bytes, *, authorize: Authorizer) -> None:
        require(authorize, Action.SET_MAINTAINER)
        new_maintainer = ensure_element(new_maintainer, "maintainer")
        old = self.maintainer
        self.maintainer = new_maintainer
        logger.info("Maintainer changed")
        self.recorder.record("maintainer_set", old=old, new=new_maintainer)

    # -- persistence view -----------------------------------------------------

    def verifying_material_items(self) -> list[tuple[ArityKey, bytes]]:
        return sorted(self._verifying_material.items())


def _check_arity(arity: ArityKey) -> ArityKey:
    key = tuple(arity)
    if len(key) != 2 or any(not isinstance(n, int) or n < 1 for n in key):
        raise InvalidParametersException(
            f"Arity key must be two positive integers, got {arity!r}",
        )
    return key
