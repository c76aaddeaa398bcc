"""
Spend engine and pool variants (mixer, anchor, variable anchor).
"""

from .variants import ANCHOR, MIXER, VANCHOR, VARIANTS, PoolVariant, VariantKind
from .nullifiers import NullifierRegistry
from .engine import PreCheck, SpendEngine
from .base import NATIVE_ASSET, BasePool, PoolMetadata, derive_pool_account
from .mixer import MixerPool
from .anchor import AnchorPool
from .vanchor import NONCE_WINDOW, VAnchorPool
from .runtime import PoolRuntime

__all__ = [
    "ANCHOR",
    "MIXER",
    "VANCHOR",
    "VARIANTS",
    "PoolVariant",
    "VariantKind",
    "NullifierRegistry",
    "PreCheck",
    "SpendEngine",
    "NATIVE_ASSET",
    "BasePool",
    "PoolMetadata",
    "derive_pool_account",
    "MixerPool",
    "AnchorPool",
    "NONCE_WINDOW",
    "VAnchorPool",
    "PoolRuntime",
]
