"""
Parameter Store module.
"""

from .store import ArityKey, ParameterStore, StoreHasher, StoreVerifier

__all__ = [
    "ArityKey",
    "ParameterStore",
    "StoreHasher",
    "StoreVerifier",
]
