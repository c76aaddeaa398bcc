"""
Pool Runtime Tests
Tests for core/pool/runtime.py

The snapshot is the persisted layout; two runtimes fed the same commands
must produce identical digests.
"""
import pytest

from core.auth import allow_all
from core.config.runtime import RuntimeConfig
from core.crypto.hasher import Keccak256Hasher
from core.crypto.hashing import to_hex
from core.pool.runtime import PoolRuntime
from core.schemas.errors import NotInitializedException
from core.schemas.element import ZERO_ELEMENT

from fixtures.common import HASH_PARAMETERS, make_account, make_element, make_runtime
from fixtures.pool_fixtures import make_withdraw


def drive(runtime: PoolRuntime) -> None:
    tree_id = runtime.anchor.create(100, 3, authorize=allow_all)
    runtime.linkable.add_edge(tree_id, 5, make_element(55), 0, authorize=allow_all)
    runtime.anchor.deposit(make_account("alice"), tree_id, make_element(1))
    request = make_withdraw(runtime.anchor, tree_id, make_element(77))
    runtime.anchor.withdraw(make_account("relayer"), tree_id, request)


class TestWiring:
    def test_components_share_one_recorder(self, runtime):
        assert runtime.params.recorder is runtime.recorder
        assert runtime.accumulator.recorder is runtime.recorder
        assert runtime.linkable.recorder is runtime.recorder
        assert runtime.mixer.recorder is runtime.recorder

    def test_hasher_backend_from_config(self):
        config = RuntimeConfig.from_dict(
            {"params": {"hasher": "keccak256", "hash_parameters": to_hex(HASH_PARAMETERS)}}
        )
        runtime = PoolRuntime(config)
        assert runtime.params.hasher_factory is Keccak256Hasher
        assert runtime.snapshot().params.hasher == "keccak256"

    def test_without_hash_parameters(self):
        runtime = PoolRuntime(RuntimeConfig())
        with pytest.raises(NotInitializedException):
            runtime.mixer.create(100, 3, authorize=allow_all)

    def test_chain_identity(self):
        runtime = make_runtime(chain_id=1080)
        assert runtime.linkable.chain_id_type == 0x20000000438


class TestSnapshot:
    def test_snapshot_layout(self, runtime):
        drive(runtime)
        snapshot = runtime.snapshot()

        assert snapshot.next_tree_id == 1
        tree = snapshot.trees[0]
        assert tree.leaf_count == 1
        assert tree.max_edges == 1
        assert tree.edges[0].chain_id == 5
        assert tree.nullifiers == [make_element(77)]
        assert [(p.kind, p.deposit_size) for p in snapshot.pools] == [("anchor", 100)]
        assert snapshot.params.hash_parameters == HASH_PARAMETERS

    def test_same_commands_same_digest(self):
        first, second = make_runtime(), make_runtime()
        drive(first)
        drive(second)
        assert first.state_digest() == second.state_digest()

    def test_digest_changes_with_state(self, runtime):
        before = runtime.state_digest()
        runtime.linkable.create(3, ZERO_ELEMENT, 0, authorize=allow_all)
        assert runtime.state_digest() != before
