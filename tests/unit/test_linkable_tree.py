"""
Linkable Tree Unit Tests
Tests for core/linkable/tree.py

1. Edge history capacity 2 on peer 7: after roots A, B, C only B and C
   are known
2. add_edge / update_edge on peer 5: both roots known, unseen root not
3. Duplicate add_edge fails without touching the existing edge
4. Edge capacity, unknown edges, zero neighbor roots
5. Root-count and positional neighbor-root checks used by spends
"""
import pytest

from core.auth import Action, allow_actions, allow_all
from core.linkable.chain_ids import (
    CHAIN_TYPE_SUBSTRATE,
    compute_chain_id_type,
    decode_resource_id,
    encode_resource_id,
)
from core.linkable.tree import LinkableTree
from core.schemas.element import ZERO_ELEMENT
from core.schemas.errors import (
    EdgeAlreadyExistsException,
    EdgeCapacityExceededException,
    InvalidMerkleRootsException,
    InvalidNeighborRootException,
    InvalidParametersException,
    UnauthorizedException,
    UnknownEdgeException,
    UnknownTreeException,
)

from fixtures.common import make_accumulator, make_element


def make_linkable(edge_history_length: int = 30, chain_id: int = 1080) -> LinkableTree:
    return LinkableTree(
        make_accumulator(),
        chain_id=chain_id,
        edge_history_length=edge_history_length,
    )


class TestCreate:
    def test_create_records_max_edges(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)

        assert linkable.is_linkable(tree_id)
        assert linkable.get_max_edges(tree_id) == 2
        assert linkable.get_neighbor_edges(tree_id) == []

    def test_negative_max_edges(self):
        linkable = make_linkable()
        with pytest.raises(InvalidParametersException):
            linkable.create(3, ZERO_ELEMENT, -1, authorize=allow_all)
        assert linkable.accumulator.tree_ids() == []

    def test_plain_accumulator_tree_is_not_linkable(self):
        linkable = make_linkable()
        tree_id = linkable.accumulator.create(3, ZERO_ELEMENT, authorize=allow_all)

        assert not linkable.is_linkable(tree_id)
        with pytest.raises(UnknownTreeException):
            linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)

    def test_chain_id_type(self):
        assert make_linkable(chain_id=1080).chain_id_type == 0x20000000438


class TestEdges:
    def test_peer_seven_history_capacity_two(self):
        linkable = make_linkable(edge_history_length=2)
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        a, b, c = make_element(101), make_element(102), make_element(103)

        linkable.add_edge(tree_id, 7, make_element(100), 0, authorize=allow_all)
        for index, root in enumerate((a, b, c), start=1):
            linkable.update_edge(tree_id, 7, root, index, authorize=allow_all)

        assert not linkable.is_known_neighbor_root(tree_id, 7, a)
        assert linkable.is_known_neighbor_root(tree_id, 7, b)
        assert linkable.is_known_neighbor_root(tree_id, 7, c)
        assert not linkable.is_known_root(tree_id, a)
        assert linkable.get_edge(tree_id, 7).latest_leaf_index == 3

    def test_peer_five_add_then_update(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)
        r1, r2 = make_element(11), make_element(12)

        linkable.add_edge(tree_id, 5, r1, 0, authorize=allow_all)
        linkable.update_edge(tree_id, 5, r2, 1, authorize=allow_all)

        assert linkable.is_known_root(tree_id, r1)
        assert linkable.is_known_root(tree_id, r2)
        assert not linkable.is_known_root(tree_id, make_element(13))
        assert linkable.get_neighbor_roots(tree_id) == [r2]

    def test_duplicate_add_keeps_existing_edge(self):
        linkable = make_linkable(edge_history_length=2)
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)
        r1, r2 = make_element(21), make_element(22)
        linkable.add_edge(tree_id, 5, r1, 4, authorize=allow_all)

        with pytest.raises(EdgeAlreadyExistsException):
            linkable.add_edge(tree_id, 5, r2, 9, authorize=allow_all)

        edge = linkable.get_edge(tree_id, 5)
        assert edge.root == r1
        assert edge.latest_leaf_index == 4
        assert list(edge.root_history) == [r1]
        assert not linkable.is_known_root(tree_id, r2)

    def test_capacity_exceeded(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)

        with pytest.raises(EdgeCapacityExceededException):
            linkable.add_edge(tree_id, 6, make_element(2), 0, authorize=allow_all)
        assert not linkable.has_edge(tree_id, 6)

    def test_zero_edge_slots(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 0, authorize=allow_all)
        with pytest.raises(EdgeCapacityExceededException):
            linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)

    def test_update_unknown_edge(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        with pytest.raises(UnknownEdgeException):
            linkable.update_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)

    def test_zero_root_never_known_neighbor(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        linkable.add_edge(tree_id, 5, ZERO_ELEMENT, 0, authorize=allow_all)
        assert not linkable.is_known_neighbor_root(tree_id, 5, ZERO_ELEMENT)

    def test_default_resource_id(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        edge = linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)

        assert edge.src_resource_id == encode_resource_id(tree_id, 5)
        assert decode_resource_id(edge.src_resource_id) == (tree_id, 5)

    def test_typed_peer_chain_id(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        peer = compute_chain_id_type(1081, CHAIN_TYPE_SUBSTRATE)

        edge = linkable.add_edge(tree_id, peer, make_element(7), 0, authorize=allow_all)

        assert linkable.is_known_root(tree_id, make_element(7))
        assert linkable.is_known_neighbor_root(tree_id, peer, make_element(7))
        assert decode_resource_id(edge.src_resource_id) == (tree_id, peer)

    def test_out_of_range_peer_chain_id(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)

        with pytest.raises(InvalidParametersException):
            linkable.add_edge(tree_id, 2**64, make_element(7), 0, authorize=allow_all)
        assert linkable.get_neighbor_edges(tree_id) == []

    def test_edges_keep_creation_order(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 3, authorize=allow_all)
        for chain_id in (9, 2, 5):
            linkable.add_edge(tree_id, chain_id, make_element(chain_id), 0, authorize=allow_all)

        assert [e.chain_id for e in linkable.get_neighbor_edges(tree_id)] == [9, 2, 5]

    def test_edge_commands_need_their_own_action(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        only_add = allow_actions([Action.ADD_EDGE])

        linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=only_add)
        with pytest.raises(UnauthorizedException):
            linkable.update_edge(tree_id, 5, make_element(2), 1, authorize=only_add)
        assert linkable.get_edge(tree_id, 5).root == make_element(1)

    def test_edge_events(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        linkable.add_edge(tree_id, 5, make_element(1), 0, authorize=allow_all)
        linkable.update_edge(tree_id, 5, make_element(2), 1, authorize=allow_all)

        kinds = [e.kind for e in linkable.recorder.get_events(tree_id=tree_id)]
        assert kinds == ["tree_created", "edge_added", "edge_updated"]


class TestSpendChecks:
    def test_root_count_must_match_edge_slots(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)

        linkable.ensure_max_edges(tree_id, 3)
        with pytest.raises(InvalidMerkleRootsException):
            linkable.ensure_max_edges(tree_id, 2)

    def test_positional_neighbor_roots(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)
        r5, r6 = make_element(5), make_element(6)
        linkable.add_edge(tree_id, 5, r5, 0, authorize=allow_all)
        linkable.add_edge(tree_id, 6, r6, 0, authorize=allow_all)

        linkable.ensure_known_neighbor_roots(tree_id, [r5, r6])
        with pytest.raises(InvalidNeighborRootException):
            linkable.ensure_known_neighbor_roots(tree_id, [r6, r5])

    def test_too_few_neighbor_roots(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 2, authorize=allow_all)
        linkable.add_edge(tree_id, 5, make_element(5), 0, authorize=allow_all)
        with pytest.raises(InvalidMerkleRootsException):
            linkable.ensure_known_neighbor_roots(tree_id, [])

    def test_local_roots_known(self):
        linkable = make_linkable()
        tree_id = linkable.create(3, ZERO_ELEMENT, 1, authorize=allow_all)
        root = linkable.insert(tree_id, make_element(1))
        assert linkable.is_known_root(tree_id, root)
        assert linkable.get_root(tree_id) == root
