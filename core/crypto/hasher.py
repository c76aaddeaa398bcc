"""
Module 02 - Tree Hasher Backends

Two-to-one hash functions used to combine Merkle nodes.

Owner: Protocol/Crypto Engineer
Module ID: M02

A backend is constructed from the opaque hash-parameter bytes held by the
Parameter Store and must be deterministic and side-effect free:

    hasher = Sha256Hasher(parameters)
    parent = hasher.hash_two(left, right)

The parameter bytes act as a domain prefix, so two stores configured with
different parameters produce unrelated trees. Digests are read as
little-endian integers and reduced modulo the BN254 scalar field, so every
node is a valid field element.
"""
from __future__ import annotations

from typing import Callable, Protocol

from core.crypto.hashing import keccak256, sha256
from core.schemas.element import ensure_element, reduce_to_field


class Hasher(Protocol):
    """hash_two(Element, Element) -> Element."""

    def hash_two(self, left: bytes, right: bytes) -> bytes:
        ...


class Sha256Hasher:
    """SHA-256 over parameters || left || right, reduced into the field."""

    name = "sha256"

    def __init__(self, parameters: bytes) -> None:
        self.parameters = parameters

    def hash_two(self, left: bytes, right: bytes) -> bytes:
        return reduce_to_field(
            sha256(self.parameters + ensure_element(left) + ensure_element(right))
        )

    def __repr__(self) -> str:
        return f"Sha256Hasher(parameters={len(self.parameters)} bytes)"


class Keccak256Hasher:
    """Keccak-256 over parameters || left || right, reduced into the field."""

    name = "keccak256"

    def __init__(self, parameters: bytes) -> None:
        self.parameters = parameters

    def hash_two(self, left: bytes, right: bytes) -> bytes:
        return reduce_to_field(
            keccak256(self.parameters + ensure_element(left) + ensure_element(right))
        )

    def __repr__(self) -> str:
        return f"Keccak256Hasher(parameters={len(self.parameters)} bytes)"


HasherFactory = Callable[[bytes], Hasher]

HASHER_BACKENDS: dict[str, HasherFactory] = {
    Sha256Hasher.name: Sha256Hasher,
    Keccak256Hasher.name: Keccak256Hasher,
}


def get_hasher_backend(name: str) -> HasherFactory:
    """
    Look up a hasher backend by name.

    Raises:
        KeyError: If no backend is registered under that name
    """
    try:
        return HASHER_BACKENDS[name.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown hasher backend {name!r}; available: {sorted(HASHER_BACKENDS)}"
        ) from None


__all__ = [
    "Hasher",
    "HasherFactory",
    "Sha256Hasher",
    "Keccak256Hasher",
    "HASHER_BACKENDS",
    "get_hasher_backend",
]
