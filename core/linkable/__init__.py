"""
Linkable tree: accumulator trees with bounded edges to peer chains.
"""

from .chain_ids import (
    CHAIN_TYPE_EVM,
    CHAIN_TYPE_SUBSTRATE,
    compute_chain_id_type,
    decode_resource_id,
    encode_resource_id,
    split_chain_id_type,
)
from .tree import DEFAULT_EDGE_HISTORY_LENGTH, Edge, LinkableTree

__all__ = [
    "CHAIN_TYPE_EVM",
    "CHAIN_TYPE_SUBSTRATE",
    "compute_chain_id_type",
    "decode_resource_id",
    "encode_resource_id",
    "split_chain_id_type",
    "DEFAULT_EDGE_HISTORY_LENGTH",
    "Edge",
    "LinkableTree",
]
