"""
Chain identity helpers.

A typed chain id prefixes a chain's numeric id with a two-byte chain type,
so ids from different ledger families never collide. Edges are keyed by
typed chain ids. A resource id names one tree on one chain in a single
32-byte value.
"""

from __future__ import annotations

from core.schemas.element import ensure_element
from core.schemas.errors import InvalidParametersException

CHAIN_TYPE_EVM = bytes([1, 0])
CHAIN_TYPE_SUBSTRATE = bytes([2, 0])

U32_MAX = 2**32 - 1
U64_MAX = 2**64 - 1


def _check_range(name: str, value: int, upper: int, bits: int) -> None:
    if not 0 <= value <= upper:
        raise InvalidParametersException(
            f"{name} must fit in {bits} bits, got {value}",
            details={name: value},
        )


def compute_chain_id_type(chain_id: int, chain_type: bytes) -> int:
    """
    Typed chain id: the big-endian u64 of
    [0, 0, chain_type[0], chain_type[1], chain_id (u32 big-endian)].

    Example:
        >>> hex(compute_chain_id_type(1080, CHAIN_TYPE_SUBSTRATE))
        '0x20000000438'
    """
    _check_range("chain_id", chain_id, U32_MAX, 32)
    if len(chain_type) != 2:
        raise InvalidParametersException(
            f"chain_type must be 2 bytes, got {len(chain_type)}",
            details={"chain_type_len": len(chain_type)},
        )
    raw = bytes(2) + bytes(chain_type) + chain_id.to_bytes(4, "big")
    return int.from_bytes(raw, "big")


def split_chain_id_type(chain_id_type: int) -> tuple[int, bytes]:
    """Inverse of compute_chain_id_type: (chain_id, chain_type)."""
    _check_range("chain_id_type", chain_id_type, U64_MAX, 64)
    raw = chain_id_type.to_bytes(8, "big")
    return int.from_bytes(raw[4:], "big"), raw[2:4]


def encode_resource_id(tree_id: int, chain_id: int) -> bytes:
    """
    32-byte resource id: tree_id (u32 little-endian), 20 zero bytes, then
    the typed chain_id (u64 little-endian).
    """
    _check_range("tree_id", tree_id, U32_MAX, 32)
    _check_range("chain_id", chain_id, U64_MAX, 64)
    return tree_id.to_bytes(4, "little") + bytes(20) + chain_id.to_bytes(8, "little")


def decode_resource_id(resource_id: bytes) -> tuple[int, int]:
    """Return (tree_id, chain_id) from a resource id."""
    resource_id = ensure_element(resource_id, "resource_id")
    return (
        int.from_bytes(resource_id[0:4], "little"),
        int.from_bytes(resource_id[24:32], "little"),
    )


__all__ = [
    "CHAIN_TYPE_EVM",
    "CHAIN_TYPE_SUBSTRATE",
    "compute_chain_id_type",
    "split_chain_id_type",
    "encode_resource_id",
    "decode_resource_id",
]
