"""
Module 01 - Schemas & Canonicalization
File: element.py

Purpose: The 32-byte Element type shared by leaves, roots, nullifier hashes
and commitments, plus the scalar-field helpers used to turn integers and
digests into elements.

Elements are plain ``bytes`` of length 32 inside the core. On pydantic
models they are declared as ``ElementField``, which accepts raw bytes or a
0x-prefixed hex string and serializes back to hex in JSON mode.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from core.crypto.hashing import from_hex, to_hex

from .errors import SchemaValidationException


ELEMENT_SIZE = 32

ZERO_ELEMENT: bytes = bytes(ELEMENT_SIZE)

# BN254 scalar field modulus; public inputs are interpreted in this field.
FIELD_MODULUS = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)


def ensure_element(value: Any, field_path: str | None = None) -> bytes:
    """
    Coerce bytes or 0x-hex into a 32-byte element.

    Raises:
        SchemaValidationException: wrong type, bad hex or wrong length
    """
    if isinstance(value, str):
        try:
            value = from_hex(value)
        except ValueError as e:
            raise SchemaValidationException(str(e), field_path=field_path) from e
    if isinstance(value, bytearray):
        value = bytes(value)
    if not isinstance(value, bytes):
        raise SchemaValidationException(
            f"Element must be bytes or 0x-hex, got {type(value).__name__}",
            field_path=field_path,
        )
    if len(value) != ELEMENT_SIZE:
        raise SchemaValidationException(
            f"Element must be {ELEMENT_SIZE} bytes, got {len(value)}",
            field_path=field_path,
        )
    return value


def is_zero_element(value: bytes) -> bool:
    return value == ZERO_ELEMENT


def element_from_int(value: int) -> bytes:
    """
    Encode an integer as a field element (little-endian, reduced mod p).

    Negative values wrap to ``p + value``, which is how a signed amount
    appears inside the circuit.
    """
    return (value % FIELD_MODULUS).to_bytes(ELEMENT_SIZE, "little")


def element_to_int(value: bytes) -> int:
    return int.from_bytes(ensure_element(value), "little")


def reduce_to_field(digest: bytes) -> bytes:
    """Interpret a digest as a little-endian integer and reduce it into the field."""
    return element_from_int(int.from_bytes(digest, "little"))


def _coerce_element(value: Any) -> bytes:
    try:
        return ensure_element(value)
    except SchemaValidationException as e:
        # pydantic only turns ValueError into a ValidationError
        raise ValueError(e.message) from e


ElementField = Annotated[
    bytes,
    BeforeValidator(_coerce_element),
    PlainSerializer(to_hex, return_type=str, when_used="json"),
]


__all__ = [
    "ELEMENT_SIZE",
    "ZERO_ELEMENT",
    "FIELD_MODULUS",
    "ElementField",
    "ensure_element",
    "is_zero_element",
    "element_from_int",
    "element_to_int",
    "reduce_to_field",
]
