"""
Common test fixtures shared by all modules.

Provides factory functions for the pool core building blocks:
- elements and accounts
- a ParameterStore / MerkleAccumulator with hash parameters set
- a fully wired PoolRuntime
- a verifier that counts its calls

These are the foundational building blocks used by higher-level fixtures.
"""

from typing import Iterable, Optional

from core.auth import allow_all
from core.config.runtime import RuntimeConfig
from core.crypto.hashing import sha256, to_hex
from core.crypto.verifier import DigestVerifier
from core.merkle.accumulator import MerkleAccumulator
from core.params.store import ParameterStore
from core.pool.runtime import PoolRuntime
from core.pool.variants import PoolVariant
from core.schemas.inputs import SpendInputs


HASH_PARAMETERS = b"linkpool-test-hash-parameters"
VERIFYING_MATERIAL = b"linkpool-test-verifying-key"
CHAIN_ID = 1080

# (roots, nullifiers) keys used by the default pools:
# mixer 1 root, anchor and vanchor with one edge slot carry 2 roots
DEFAULT_ARITIES = ((1, 1), (2, 1), (2, 2), (2, 16))


def make_element(i: int) -> bytes:
    """Distinct non-zero 32-byte element for small i >= 1."""
    return i.to_bytes(32, "big")


def make_account(name: str) -> bytes:
    return sha256(b"account/" + name.encode("utf-8"))


class CountingVerifier(DigestVerifier):
    """DigestVerifier that records how often it was asked to verify."""

    def __init__(self) -> None:
        self.calls = 0

    def verify(self, public_inputs: bytes, proof: bytes, key: bytes) -> bool:
        self.calls += 1
        return super().verify(public_inputs, proof, key)


def prove(variant: PoolVariant, inputs: SpendInputs, key: bytes = VERIFYING_MATERIAL) -> bytes:
    """Proof the DigestVerifier accepts for these public inputs."""
    return DigestVerifier().prove(variant.encode(inputs), key)


def make_store(
    *,
    with_hash_parameters: bool = True,
    arities: Iterable[tuple[int, int]] = (),
    verifier: Optional[DigestVerifier] = None,
) -> ParameterStore:
    store = ParameterStore(verifier_backend=verifier)
    if with_hash_parameters:
        store.set_hash_parameters(HASH_PARAMETERS, authorize=allow_all)
    for arity in arities:
        store.set_verifying_material(arity, VERIFYING_MATERIAL, authorize=allow_all)
    return store


def make_accumulator(
    *,
    root_history_size: int = 100,
    max_tree_depth: int = 32,
    store: Optional[ParameterStore] = None,
) -> MerkleAccumulator:
    return MerkleAccumulator(
        store or make_store(),
        max_tree_depth=max_tree_depth,
        root_history_size=root_history_size,
    )


def make_runtime(
    *,
    chain_id: int = CHAIN_ID,
    root_history_size: int = 100,
    edge_history_length: int = 30,
    arities: Iterable[tuple[int, int]] = DEFAULT_ARITIES,
    verifier: Optional[DigestVerifier] = None,
    vanchor: Optional[dict] = None,
) -> PoolRuntime:
    config = RuntimeConfig.from_dict(
        {
            "tree": {"root_history_size": root_history_size},
            "linkable": {"chain_id": chain_id, "edge_history_length": edge_history_length},
            "params": {"hash_parameters": to_hex(HASH_PARAMETERS)},
            "vanchor": vanchor or {},
        }
    )
    runtime = PoolRuntime(config, verifier_backend=verifier or CountingVerifier())
    for arity in arities:
        runtime.params.set_verifying_material(arity, VERIFYING_MATERIAL, authorize=allow_all)
    return runtime
