"""
Merkle Accumulator Unit Tests
Tests for core/merkle/accumulator.py

1. Depth-3 tree: 8 inserts succeed, the 9th fails TreeFull, the root
   after the 8th insert matches a full reference rebuild
2. After every insert the root equals a reference rebuild of that prefix
3. A failed insert leaves the root and leaf count unchanged
4. Root history keeps the most recent roots only
5. Depth bounds, leaf ranges, unknown trees, uninitialized parameters
"""
import pytest

from core.auth import allow_all, deny_all
from core.crypto.hasher import Sha256Hasher
from core.merkle.accumulator import MerkleAccumulator
from core.merkle.merkle_tree import build_merkle_root, compute_zero_hashes
from core.params.store import ParameterStore
from core.schemas.element import FIELD_MODULUS, ZERO_ELEMENT, element_to_int
from core.schemas.errors import (
    InvalidDepthException,
    InvalidLeafRangeException,
    NotInitializedException,
    TreeFullException,
    UnauthorizedException,
    UnknownTreeException,
)

from fixtures.common import HASH_PARAMETERS, make_accumulator, make_element, make_store

HASH_TWO = Sha256Hasher(HASH_PARAMETERS).hash_two


class TestCreate:
    def test_tree_ids_are_sequential(self, accumulator):
        assert accumulator.create(3, ZERO_ELEMENT, authorize=allow_all) == 0
        assert accumulator.create(4, ZERO_ELEMENT, authorize=allow_all) == 1
        assert accumulator.next_tree_id == 2
        assert accumulator.tree_ids() == [0, 1]

    def test_empty_tree_root_is_default_root(self, accumulator):
        tree_id = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        expected = compute_zero_hashes(3, ZERO_ELEMENT, HASH_TWO)[3]

        assert accumulator.get_root(tree_id) == expected
        assert accumulator.get_default_root(tree_id) == expected
        assert accumulator.is_known_root(tree_id, expected)

    @pytest.mark.parametrize("depth", [0, -1, 33])
    def test_invalid_depth(self, accumulator, depth):
        with pytest.raises(InvalidDepthException):
            accumulator.create(depth, ZERO_ELEMENT, authorize=allow_all)
        assert accumulator.next_tree_id == 0

    def test_max_depth_is_configurable(self):
        accumulator = make_accumulator(max_tree_depth=4)
        accumulator.create(4, ZERO_ELEMENT, authorize=allow_all)
        with pytest.raises(InvalidDepthException):
            accumulator.create(5, ZERO_ELEMENT, authorize=allow_all)

    def test_unauthorized(self, accumulator):
        with pytest.raises(UnauthorizedException):
            accumulator.create(3, ZERO_ELEMENT, authorize=deny_all)
        assert accumulator.tree_ids() == []

    def test_requires_hash_parameters(self):
        accumulator = MerkleAccumulator(ParameterStore())
        with pytest.raises(NotInitializedException):
            accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        assert accumulator.next_tree_id == 0

    def test_creation_is_recorded(self, accumulator):
        tree_id = accumulator.create(2, ZERO_ELEMENT, authorize=allow_all)
        events = accumulator.recorder.get_events(kind="tree_created")
        assert len(events) == 1
        assert events[0].tree_id == tree_id
        assert events[0].data["depth"] == 2


class TestInsert:
    def test_depth_three_scenario(self, accumulator):
        tree_id = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        leaves = [make_element(i) for i in range(1, 9)]

        for leaf in leaves:
            root = accumulator.insert(tree_id, leaf)

        assert root == build_merkle_root(leaves, 3, ZERO_ELEMENT, HASH_TWO)
        with pytest.raises(TreeFullException):
            accumulator.insert(tree_id, make_element(9))

    def test_root_matches_reference_for_every_prefix(self, accumulator):
        tree_id = accumulator.create(4, ZERO_ELEMENT, authorize=allow_all)
        leaves = [make_element(i) for i in range(1, 17)]

        for n, leaf in enumerate(leaves, start=1):
            root = accumulator.insert(tree_id, leaf)
            assert root == build_merkle_root(leaves[:n], 4, ZERO_ELEMENT, HASH_TWO)
            assert accumulator.get_root(tree_id) == root

    def test_custom_zero_element_matches_reference(self, accumulator):
        zero = make_element(1000)
        tree_id = accumulator.create(3, zero, authorize=allow_all)
        leaves = [make_element(i) for i in range(1, 4)]
        for leaf in leaves:
            root = accumulator.insert(tree_id, leaf)
        assert root == build_merkle_root(leaves, 3, zero, HASH_TWO)

    def test_full_tree_leaves_state_unchanged(self, accumulator):
        tree_id = accumulator.create(1, ZERO_ELEMENT, authorize=allow_all)
        accumulator.insert(tree_id, make_element(1))
        root = accumulator.insert(tree_id, make_element(2))

        with pytest.raises(TreeFullException):
            accumulator.insert(tree_id, make_element(3))

        tree = accumulator.get_tree(tree_id)
        assert accumulator.get_root(tree_id) == root
        assert tree.leaf_count == 2
        assert accumulator.capacity_remaining(tree_id) == 0

    def test_trees_are_independent(self, accumulator):
        first = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        second = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        accumulator.insert(first, make_element(1))

        assert accumulator.get_root(second) == accumulator.get_default_root(second)
        assert accumulator.get_tree(second).leaf_count == 0

    def test_roots_are_field_elements(self, accumulator):
        tree_id = accumulator.create(4, ZERO_ELEMENT, authorize=allow_all)
        for i in range(16):
            accumulator.insert(tree_id, make_element(i + 1))

        tree = accumulator.get_tree(tree_id)
        for node in [*tree.root_history, *tree.filled_subtrees, tree.default_root]:
            assert element_to_int(node) < FIELD_MODULUS

    def test_unknown_tree(self, accumulator):
        with pytest.raises(UnknownTreeException):
            accumulator.insert(5, make_element(1))

    def test_hash_parameters_read_per_insert(self, store):
        accumulator = make_accumulator(store=store)
        tree_id = accumulator.create(2, ZERO_ELEMENT, authorize=allow_all)
        store.set_hash_parameters(b"rotated", authorize=allow_all)

        root = accumulator.insert(tree_id, make_element(1))

        rotated = Sha256Hasher(b"rotated").hash_two
        zeros = compute_zero_hashes(2, ZERO_ELEMENT, HASH_TWO)
        assert root == rotated(rotated(make_element(1), zeros[0]), zeros[1])


class TestRootHistory:
    def test_recent_roots_known(self):
        accumulator = make_accumulator(root_history_size=3)
        tree_id = accumulator.create(4, ZERO_ELEMENT, authorize=allow_all)
        roots = [accumulator.insert(tree_id, make_element(i)) for i in range(1, 6)]

        for root in roots[-3:]:
            assert accumulator.is_known_root(tree_id, root)
        for root in roots[:2]:
            assert not accumulator.is_known_root(tree_id, root)

    def test_unseen_root_unknown(self, accumulator):
        tree_id = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        accumulator.insert(tree_id, make_element(1))
        assert not accumulator.is_known_root(tree_id, make_element(12345))


class TestLeaves:
    def test_get_leaves_range(self, accumulator):
        tree_id = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        leaves = [make_element(i) for i in range(1, 5)]
        for leaf in leaves:
            accumulator.insert(tree_id, leaf)

        assert accumulator.get_leaves(tree_id, 0, 4) == leaves
        assert accumulator.get_leaves(tree_id, 1, 3) == leaves[1:3]
        assert accumulator.get_leaves(tree_id, 2, 2) == []

    @pytest.mark.parametrize("start,end", [(-1, 2), (3, 2), (0, 5)])
    def test_invalid_range(self, accumulator, start, end):
        tree_id = accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)
        for i in range(1, 5):
            accumulator.insert(tree_id, make_element(i))
        with pytest.raises(InvalidLeafRangeException):
            accumulator.get_leaves(tree_id, start, end)
