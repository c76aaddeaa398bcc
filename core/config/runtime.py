"""
Runtime Configuration

Central configuration for tree limits, chain identity, parameter backends
and variable-anchor amount limits.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Optional
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class TreeConfig:
    """Limits of the Merkle accumulator."""
    max_tree_depth: int = 32
    root_history_size: int = 100
    zero_element: str = "0x" + "00" * 32


@dataclass
class LinkableConfig:
    """Identity of the local chain and edge history bound."""
    chain_id: int = 0
    chain_type: str = "0x0200"
    edge_history_length: int = 30


@dataclass
class ParamsConfig:
    """Parameter store backends and optional initial values."""
    hasher: str = "sha256"
    verifier: str = "digest"
    hash_parameters: Optional[str] = None  # 0x-hex
    maintainer: Optional[str] = None  # 0x-hex account


@dataclass
class VAnchorConfig:
    """Variable-anchor amount limits."""
    max_fee: int = 2**128 - 1
    max_ext_amount: int = 2**128 - 1
    max_deposit_amount: int = 2**128 - 1
    min_withdraw_amount: int = 0


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration of a pool runtime.

    Can be loaded from:
    - Environment variables (LINKPOOL_ prefix)
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    linkable: LinkableConfig = field(default_factory=LinkableConfig)
    params: ParamsConfig = field(default_factory=ParamsConfig)
    vanchor: VAnchorConfig = field(default_factory=VAnchorConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - LINKPOOL_MAX_TREE_DEPTH: Maximum tree depth
        - LINKPOOL_ROOT_HISTORY_SIZE: Roots kept per tree
        - LINKPOOL_CHAIN_ID: Local chain id
        - LINKPOOL_CHAIN_TYPE: Two-byte chain type as 0x-hex
        - LINKPOOL_EDGE_HISTORY_LENGTH: Roots kept per edge
        - LINKPOOL_HASHER: Hasher backend name
        - LINKPOOL_VERIFIER: Verifier backend name
        - LINKPOOL_HASH_PARAMETERS: Initial hash parameters as 0x-hex
        - LINKPOOL_MAINTAINER: Initial maintainer account as 0x-hex
        """
        overrides: dict[str, Any] = {}

        # Tree settings
        if os.getenv("LINKPOOL_MAX_TREE_DEPTH"):
            overrides.setdefault("tree", {})["max_tree_depth"] = int(
                os.getenv("LINKPOOL_MAX_TREE_DEPTH", "32")
            )
        if os.getenv("LINKPOOL_ROOT_HISTORY_SIZE"):
            overrides.setdefault("tree", {})["root_history_size"] = int(
                os.getenv("LINKPOOL_ROOT_HISTORY_SIZE", "100")
            )

        # Chain identity
        if os.getenv("LINKPOOL_CHAIN_ID"):
            overrides.setdefault("linkable", {})["chain_id"] = int(
                os.getenv("LINKPOOL_CHAIN_ID", "0")
            )
        if os.getenv("LINKPOOL_CHAIN_TYPE"):
            overrides.setdefault("linkable", {})["chain_type"] = os.getenv("LINKPOOL_CHAIN_TYPE")
        if os.getenv("LINKPOOL_EDGE_HISTORY_LENGTH"):
            overrides.setdefault("linkable", {})["edge_history_length"] = int(
                os.getenv("LINKPOOL_EDGE_HISTORY_LENGTH", "30")
            )

        # Parameter store
        if os.getenv("LINKPOOL_HASHER"):
            overrides.setdefault("params", {})["hasher"] = os.getenv("LINKPOOL_HASHER")
        if os.getenv("LINKPOOL_VERIFIER"):
            overrides.setdefault("params", {})["verifier"] = os.getenv("LINKPOOL_VERIFIER")
        if os.getenv("LINKPOOL_HASH_PARAMETERS"):
            overrides.setdefault("params", {})["hash_parameters"] = os.getenv(
                "LINKPOOL_HASH_PARAMETERS"
            )
        if os.getenv("LINKPOOL_MAINTAINER"):
            overrides.setdefault("params", {})["maintainer"] = os.getenv("LINKPOOL_MAINTAINER")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {})
        linkable_data = data.get("linkable", {})
        params_data = data.get("params", {})
        vanchor_data = data.get("vanchor", {})

        return cls(
            tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
            linkable=LinkableConfig(**linkable_data) if linkable_data else LinkableConfig(),
            params=ParamsConfig(**params_data) if params_data else ParamsConfig(),
            vanchor=VAnchorConfig(**vanchor_data) if vanchor_data else VAnchorConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        import copy
        new_config = copy.deepcopy(self)

        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "max_tree_depth": self.tree.max_tree_depth,
                "root_history_size": self.tree.root_history_size,
                "zero_element": self.tree.zero_element,
            },
            "linkable": {
                "chain_id": self.linkable.chain_id,
                "chain_type": self.linkable.chain_type,
                "edge_history_length": self.linkable.edge_history_length,
            },
            "params": {
                "hasher": self.params.hasher,
                "verifier": self.params.verifier,
                "hash_parameters": self.params.hash_parameters,
                "maintainer": self.params.maintainer,
            },
            "vanchor": {
                "max_fee": self.vanchor.max_fee,
                "max_ext_amount": self.vanchor.max_ext_amount,
                "max_deposit_amount": self.vanchor.max_deposit_amount,
                "min_withdraw_amount": self.vanchor.min_withdraw_amount,
            },
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: RuntimeConfig) -> None:
    """Set the default runtime configuration."""
    global _default_config
    _default_config = config
