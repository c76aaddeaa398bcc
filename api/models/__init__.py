"""API response models."""

from api.models.responses import (
    EdgeInfo,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    LeavesResponse,
    NeighborEdgesResponse,
    NeighborRootsResponse,
    NullifierResponse,
    RootKnownResponse,
    TreeResponse,
)

__all__ = [
    "EdgeInfo",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "LeavesResponse",
    "NeighborEdgesResponse",
    "NeighborRootsResponse",
    "NullifierResponse",
    "RootKnownResponse",
    "TreeResponse",
]
