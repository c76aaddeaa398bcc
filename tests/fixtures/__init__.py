"""
Test fixtures package for the pool core tests.

Organized into layers:
- common.py: elements, accounts, stores, runtimes, counting verifier
- pool_fixtures.py: withdraw requests and vanchor transactions with valid proofs

Usage:
    from fixtures.common import make_runtime, make_element

    def test_something():
        runtime = make_runtime()
        tree_id = runtime.mixer.create(100, 3, authorize=allow_all)
"""

from .common import (
    CHAIN_ID,
    DEFAULT_ARITIES,
    HASH_PARAMETERS,
    VERIFYING_MATERIAL,
    CountingVerifier,
    make_accumulator,
    make_account,
    make_element,
    make_runtime,
    make_store,
    prove,
)
from .pool_fixtures import make_transaction, make_withdraw, spend_roots

__all__ = [
    "CHAIN_ID",
    "DEFAULT_ARITIES",
    "HASH_PARAMETERS",
    "VERIFYING_MATERIAL",
    "CountingVerifier",
    "make_accumulator",
    "make_account",
    "make_element",
    "make_runtime",
    "make_store",
    "prove",
    "make_transaction",
    "make_withdraw",
    "spend_roots",
]
