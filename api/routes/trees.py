"""
Tree Query Routes

Read-only views over the shared pool runtime: tree state, leaf ranges,
root membership, neighbor edges and spent nullifiers.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query

from api.deps import get_runtime
from api.models.responses import (
    EdgeInfo,
    LeavesResponse,
    NeighborEdgesResponse,
    NeighborRootsResponse,
    NullifierResponse,
    RootKnownResponse,
    TreeResponse,
)
from core.crypto.hashing import to_hex
from core.schemas.element import ensure_element


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trees", tags=["trees"])


@router.get("/{tree_id}", response_model=TreeResponse)
async def get_tree(tree_id: int) -> TreeResponse:
    runtime = get_runtime()
    tree = runtime.accumulator.get_tree(tree_id)
    linkable = runtime.linkable.is_linkable(tree_id)
    return TreeResponse(
        tree_id=tree_id,
        depth=tree.depth,
        leaf_count=tree.leaf_count,
        max_leaves=tree.max_leaves,
        root=to_hex(tree.current_root),
        default_root=to_hex(tree.default_root),
        max_edges=runtime.linkable.get_max_edges(tree_id) if linkable else None,
        pool_kind=runtime.pool_kind(tree_id),
    )


@router.get("/{tree_id}/leaves", response_model=LeavesResponse)
async def get_leaves(
    tree_id: int,
    start: int = Query(default=0, description="First leaf index (inclusive)"),
    end: Optional[int] = Query(default=None, description="Last leaf index (exclusive)"),
) -> LeavesResponse:
    """
    Leaves in [start, end). ``end`` defaults to the tree's leaf count.
    """
    runtime = get_runtime()
    if end is None:
        end = runtime.accumulator.get_tree(tree_id).leaf_count
    leaves = runtime.accumulator.get_leaves(tree_id, start, end)
    return LeavesResponse(
        tree_id=tree_id,
        start=start,
        end=end,
        leaves=[to_hex(leaf) for leaf in leaves],
    )


@router.get("/{tree_id}/roots/{root}", response_model=RootKnownResponse)
async def is_known_root(tree_id: int, root: str) -> RootKnownResponse:
    runtime = get_runtime()
    element = ensure_element(root, "root")
    local = runtime.accumulator.is_known_root(tree_id, element)
    if runtime.linkable.is_linkable(tree_id):
        known = runtime.linkable.is_known_root(tree_id, element)
    else:
        known = local
    return RootKnownResponse(tree_id=tree_id, root=to_hex(element), known=known, local=local)


@router.get("/{tree_id}/neighbor-roots", response_model=NeighborRootsResponse)
async def get_neighbor_roots(tree_id: int) -> NeighborRootsResponse:
    runtime = get_runtime()
    roots = runtime.linkable.get_neighbor_roots(tree_id)
    return NeighborRootsResponse(tree_id=tree_id, roots=[to_hex(r) for r in roots])


@router.get("/{tree_id}/neighbor-edges", response_model=NeighborEdgesResponse)
async def get_neighbor_edges(tree_id: int) -> NeighborEdgesResponse:
    runtime = get_runtime()
    return NeighborEdgesResponse(
        tree_id=tree_id,
        edges=[
            EdgeInfo(
                chain_id=edge.chain_id,
                root=to_hex(edge.root),
                latest_leaf_index=edge.latest_leaf_index,
                src_resource_id=to_hex(edge.src_resource_id),
            )
            for edge in runtime.linkable.get_neighbor_edges(tree_id)
        ],
    )


@router.get("/{tree_id}/nullifiers/{nullifier}", response_model=NullifierResponse)
async def get_nullifier(tree_id: int, nullifier: str) -> NullifierResponse:
    runtime = get_runtime()
    runtime.accumulator.get_tree(tree_id)
    element = ensure_element(nullifier, "nullifier")
    return NullifierResponse(
        tree_id=tree_id,
        nullifier=to_hex(element),
        spent=runtime.nullifiers.is_spent(tree_id, element),
    )
