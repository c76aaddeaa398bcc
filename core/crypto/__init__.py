"""
Core cryptographic utilities.

Module 02 provides hashing utilities. Tree hasher and proof verifier
backends live in ``core.crypto.hasher`` and ``core.crypto.verifier``; they
depend on the element schema, which itself imports the hex helpers below,
so they are not re-exported here.
"""
from .hashing import (
    sha256,
    keccak256,
    hash_canonical,
    to_hex,
    from_hex,
)

__all__ = [
    "sha256",
    "keccak256",
    "hash_canonical",
    "to_hex",
    "from_hex",
]
