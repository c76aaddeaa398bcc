"""
Read-only HTTP query API for the linkable privacy pool:
- GET /health - Health check
- GET /trees/{tree_id} - Tree state
- GET /trees/{tree_id}/leaves - Leaf range
- GET /trees/{tree_id}/roots/{root} - Root membership
- GET /trees/{tree_id}/neighbor-roots, /neighbor-edges - Linked peers
- GET /trees/{tree_id}/nullifiers/{nullifier} - Spent check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
