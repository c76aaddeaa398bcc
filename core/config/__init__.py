"""
Runtime Configuration Module

Provides configuration loading and management for a pool runtime.
"""

from .runtime import (
    LinkableConfig,
    ParamsConfig,
    RuntimeConfig,
    TreeConfig,
    VAnchorConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "TreeConfig",
    "LinkableConfig",
    "ParamsConfig",
    "VAnchorConfig",
    "get_default_config",
    "set_default_config",
]
