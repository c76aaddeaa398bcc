"""
API Response Models

Pydantic models for API response serialization. Elements (roots, leaves,
nullifiers) are rendered as 0x-prefixed lowercase hex.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "linkpool-api"
    version: str = "v1"


class EdgeInfo(BaseModel):
    """One linked peer chain as seen by a tree."""

    chain_id: int = Field(..., description="Peer chain id")
    root: str = Field(..., description="Latest synchronized peer root")
    latest_leaf_index: int = Field(..., description="Peer leaf index at that root")
    src_resource_id: str = Field(..., description="Resource id of the peer tree")


class TreeResponse(BaseModel):
    """Response for GET /trees/{tree_id}."""

    tree_id: int
    depth: int
    leaf_count: int
    max_leaves: int
    root: str = Field(..., description="Current root")
    default_root: str = Field(..., description="Root of the empty tree")
    max_edges: Optional[int] = Field(
        default=None, description="Edge slots, None for a tree without edges"
    )
    pool_kind: Optional[str] = Field(
        default=None, description="mixer, anchor or vanchor when a pool owns the tree"
    )


class LeavesResponse(BaseModel):
    """Response for GET /trees/{tree_id}/leaves."""

    tree_id: int
    start: int
    end: int
    leaves: list[str] = Field(default_factory=list)


class RootKnownResponse(BaseModel):
    """Response for GET /trees/{tree_id}/roots/{root}."""

    tree_id: int
    root: str
    known: bool = Field(..., description="Known locally or via any edge")
    local: bool = Field(..., description="Current root or in the local root history")


class NeighborRootsResponse(BaseModel):
    """Response for GET /trees/{tree_id}/neighbor-roots."""

    tree_id: int
    roots: list[str] = Field(default_factory=list, description="Edge creation order")


class NeighborEdgesResponse(BaseModel):
    """Response for GET /trees/{tree_id}/neighbor-edges."""

    tree_id: int
    edges: list[EdgeInfo] = Field(default_factory=list)


class NullifierResponse(BaseModel):
    """Response for GET /trees/{tree_id}/nullifiers/{nullifier}."""

    tree_id: int
    nullifier: str
    spent: bool


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = Field(default=False)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
