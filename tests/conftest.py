"""
Pytest configuration and shared fixtures for the pool core tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

import importlib

_common = importlib.import_module("fixtures.common")

make_store = _common.make_store
make_accumulator = _common.make_accumulator
make_runtime = _common.make_runtime
CountingVerifier = _common.CountingVerifier


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def store():
    """ParameterStore with hash parameters set and no verifying material."""
    return make_store()


@pytest.fixture
def accumulator(store):
    """MerkleAccumulator over the default store."""
    return make_accumulator(store=store)


@pytest.fixture
def verifier():
    """Counting development verifier."""
    return CountingVerifier()


@pytest.fixture
def runtime(verifier):
    """Fully wired PoolRuntime with verifying material for the default arities."""
    return make_runtime(verifier=verifier)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
