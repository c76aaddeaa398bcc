"""
API Dependencies

Dependency injection for the API: one process-wide PoolRuntime built from
the runtime configuration.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from core.config.runtime import RuntimeConfig, get_default_config
from core.pool.runtime import PoolRuntime

logger = logging.getLogger(__name__)

_runtime: Optional[PoolRuntime] = None


def _load_runtime_config() -> RuntimeConfig:
    """Load RuntimeConfig from LINKPOOL_CONFIG (YAML) when set, then overlay env vars.

    Without LINKPOOL_CONFIG the process-wide default config is used, which
    already carries the environment overrides.
    """
    raw = os.getenv("LINKPOOL_CONFIG")
    if not raw:
        return get_default_config()

    path = Path(raw)
    logger.info(f"Loading config from {path}")
    return RuntimeConfig.from_yaml(path).with_env_overrides()


def get_runtime() -> PoolRuntime:
    """Return the shared PoolRuntime, creating it on first use."""
    global _runtime
    if _runtime is None:
        _runtime = PoolRuntime(_load_runtime_config())
    return _runtime


def set_runtime(runtime: Optional[PoolRuntime]) -> None:
    """Replace the shared runtime (None resets it)."""
    global _runtime
    _runtime = runtime
