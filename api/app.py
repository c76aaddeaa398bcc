"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import APIError, api_error_handler, generic_error_handler, pool_error_handler
from api.routes import health, trees
from core.schemas.errors import PoolException


def _resolve_log_level() -> int:
    """Resolve log level from LINKPOOL_LOG_LEVEL, defaulting to INFO."""
    raw = os.getenv("LINKPOOL_LOG_LEVEL")
    return getattr(logging, (raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=_resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Linkpool API",
        description="""
Read-only query API for a linkable privacy pool.

## Endpoints

- **GET /trees/{tree_id}** - Depth, leaf count and current root
- **GET /trees/{tree_id}/leaves** - Leaves in a half-open index range
- **GET /trees/{tree_id}/roots/{root}** - Whether a root is known
- **GET /trees/{tree_id}/neighbor-roots** - Latest root of every edge
- **GET /trees/{tree_id}/neighbor-edges** - Full edge records
- **GET /trees/{tree_id}/nullifiers/{nullifier}** - Whether a nullifier is spent
- **GET /health** - Health check

Elements are 32 bytes, written as 0x-prefixed hex.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(PoolException, pool_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(health.router)
    app.include_router(trees.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
