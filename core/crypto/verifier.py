"""
Module 02 - Proof Verifier Backends

Owner: Protocol/Crypto Engineer
Module ID: M02

Contract every backend satisfies:

    verify(public_inputs: bytes, proof: bytes, key: bytes) -> bool

- deterministic and side-effect free
- raises ProofMalformedException when any argument is structurally invalid
  (public inputs not a whole number of 32-byte elements, proof or key of
  the wrong shape)
- returns False for a well-formed proof that does not verify

The proof system itself is a black box to the pool core. DigestVerifier is
the development backend shipped with the core: the "verifying key" is a
secret shared with the prover and a proof is a 32-byte binding of that key
to the exact public-input bytes. It offers no zero knowledge; it exists so
the spend path can run end to end without a SNARK toolchain.
"""
from __future__ import annotations

import hmac
from typing import Protocol

from core.crypto.hashing import sha256
from core.schemas.element import ELEMENT_SIZE
from core.schemas.errors import ProofMalformedException


class Verifier(Protocol):
    def verify(self, public_inputs: bytes, proof: bytes, key: bytes) -> bool:
        ...


def _check_public_inputs(public_inputs: bytes) -> None:
    if not public_inputs or len(public_inputs) % ELEMENT_SIZE != 0:
        raise ProofMalformedException(
            f"Public inputs must be a non-empty multiple of {ELEMENT_SIZE} bytes, "
            f"got {len(public_inputs)}",
            details={"public_inputs_len": len(public_inputs)},
        )


class DigestVerifier:
    """
    Verifier binding a proof to sha256(key || public_inputs).

    Example:
        >>> backend = DigestVerifier()
        >>> proof = backend.prove(inputs, key)
        >>> backend.verify(inputs, proof, key)
        True
    """

    name = "digest"
    PROOF_SIZE = 32

    def prove(self, public_inputs: bytes, key: bytes) -> bytes:
        """Produce the proof the verifier accepts for these inputs (witness side)."""
        _check_public_inputs(public_inputs)
        return sha256(key + public_inputs)

    def verify(self, public_inputs: bytes, proof: bytes, key: bytes) -> bool:
        if not key:
            raise ProofMalformedException("Verifying key is empty")
        _check_public_inputs(public_inputs)
        if len(proof) != self.PROOF_SIZE:
            raise ProofMalformedException(
                f"Proof must be {self.PROOF_SIZE} bytes, got {len(proof)}",
                details={"proof_len": len(proof)},
            )
        return hmac.compare_digest(proof, sha256(key + public_inputs))


VERIFIER_BACKENDS: dict[str, type] = {
    DigestVerifier.name: DigestVerifier,
}


def get_verifier_backend(name: str) -> Verifier:
    """
    Instantiate a verifier backend by name.

    Raises:
        KeyError: If no backend is registered under that name
    """
    try:
        return VERIFIER_BACKENDS[name.lower()]()
    except KeyError:
        raise KeyError(
            f"Unknown verifier backend {name!r}; available: {sorted(VERIFIER_BACKENDS)}"
        ) from None


__all__ = [
    "Verifier",
    "DigestVerifier",
    "VERIFIER_BACKENDS",
    "get_verifier_backend",
]
