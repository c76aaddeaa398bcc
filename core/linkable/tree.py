"""
Linkable Tree

Wraps accumulator trees with a bounded set of edges, one per peer chain.
Each edge carries the peer's latest synchronized root and leaf index plus a
bounded history of the peer's recent roots, so a spend may be proven
against a recent root of any linked chain.

Owner: Protocol/Crypto Engineer

Edges are kept in creation order; positional checks (the i-th neighbor
root of a spend against the i-th edge) rely on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.auth import Action, Authorizer, require
from core.crypto.hashing import to_hex
from core.linkable.chain_ids import (
    CHAIN_TYPE_SUBSTRATE,
    U64_MAX,
    compute_chain_id_type,
    encode_resource_id,
)
from core.merkle.accumulator import MerkleAccumulator
from core.merkle.history import RootHistory
from core.receipts.recorder import EventRecorder
from core.schemas.element import ensure_element, is_zero_element
from core.schemas.errors import (
    EdgeAlreadyExistsException,
    EdgeCapacityExceededException,
    InvalidMerkleRootsException,
    InvalidNeighborRootException,
    InvalidParametersException,
    UnknownEdgeException,
    UnknownTreeException,
)

logger = logging.getLogger(__name__)

DEFAULT_EDGE_HISTORY_LENGTH = 30


@dataclass
class Edge:
    """Synchronized view of one peer chain's tree."""

    chain_id: int
    root: bytes
    latest_leaf_index: int
    src_resource_id: bytes
    root_history: RootHistory


class LinkableTree:
    """
    Accumulator trees plus per-tree edges to peer chains.

    Example:
        >>> linkable = LinkableTree(accumulator, chain_id=1080)
        >>> tree_id = linkable.create(3, ZERO_ELEMENT, max_edges=2, authorize=allow_all)
        >>> linkable.add_edge(tree_id, 5, peer_root, 0, authorize=allow_all)
        >>> linkable.is_known_root(tree_id, peer_root)
        True
    """

    def __init__(
        self,
        accumulator: MerkleAccumulator,
        *,
        chain_id: int = 0,
        chain_type: bytes = CHAIN_TYPE_SUBSTRATE,
        edge_history_length: int = DEFAULT_EDGE_HISTORY_LENGTH,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.accumulator = accumulator
        self.chain_id = chain_id
        self.chain_type = chain_type
        self.chain_id_type = compute_chain_id_type(chain_id, chain_type)
        self.edge_history_length = edge_history_length
        self.recorder = recorder or accumulator.recorder
        self._max_edges: dict[int, int] = {}
        self._edges: dict[int, dict[int, Edge]] = {}

    # -- commands -------------------------------------------------------------

    def create(
        self,
        depth: int,
        zero_element: bytes,
        max_edges: int,
        *,
        authorize: Authorizer,
    ) -> int:
        """
        Create an accumulator tree that can link up to ``max_edges`` peers.

        Raises:
            InvalidParametersException: If max_edges is negative
            plus everything MerkleAccumulator.create raises
        """
        if max_edges < 0:
            raise InvalidParametersException(f"max_edges must be >= 0, got {max_edges}")
        tree_id = self.accumulator.create(depth, zero_element, authorize=authorize)
        self._max_edges[tree_id] = max_edges
        self._edges[tree_id] = {}
        logger.info(f"Tree {tree_id} is linkable (max_edges={max_edges})")
        return tree_id

    def add_edge(
        self,
        tree_id: int,
        chain_id: int,
        root: bytes,
        latest_leaf_index: int,
        *,
        src_resource_id: Optional[bytes] = None,
        authorize: Authorizer,
    ) -> Edge:
        """
        Link a new peer chain.

        Raises:
            UnauthorizedException: If the predicate refuses the action
            UnknownTreeException: If the tree is not a linkable tree
            EdgeAlreadyExistsException: If the peer is already linked
            EdgeCapacityExceededException: If max_edges peers are linked
            InvalidParametersException: If chain_id is not a u64
        """
        require(authorize, Action.ADD_EDGE)
        if not 0 <= chain_id <= U64_MAX:
            raise InvalidParametersException(
                f"chain_id must fit in 64 bits, got {chain_id}",
                details={"chain_id": chain_id},
            )
        edges = self._edges_of(tree_id)
        if chain_id in edges:
            raise EdgeAlreadyExistsException(tree_id, chain_id)
        max_edges = self._max_edges[tree_id]
        if len(edges) >= max_edges:
            raise EdgeCapacityExceededException(tree_id, max_edges)
        root = ensure_element(root, "root")

        history = RootHistory(self.edge_history_length)
        history.push(root)
        edge = Edge(
            chain_id=chain_id,
            root=root,
            latest_leaf_index=latest_leaf_index,
            src_resource_id=(
                ensure_element(src_resource_id, "src_resource_id")
                if src_resource_id is not None
                else encode_resource_id(tree_id, chain_id)
            ),
            root_history=history,
        )
        edges[chain_id] = edge

        logger.info(f"Tree {tree_id}: added edge to chain {chain_id}, root={to_hex(root)}")
        self.recorder.record(
            "edge_added",
            tree_id=tree_id,
            chain_id=chain_id,
            root=root,
            latest_leaf_index=latest_leaf_index,
        )
        return edge

    def update_edge(
        self,
        tree_id: int,
        chain_id: int,
        root: bytes,
        latest_leaf_index: int,
        *,
        src_resource_id: Optional[bytes] = None,
        authorize: Authorizer,
    ) -> Edge:
        """
        Record a newer root for an already linked peer.

        Raises:
            UnauthorizedException: If the predicate refuses the action
            UnknownEdgeException: If the peer is not linked
        """
        require(authorize, Action.UPDATE_EDGE)
        edge = self.get_edge(tree_id, chain_id)
        root = ensure_element(root, "root")
        if src_resource_id is not None:
            src_resource_id = ensure_element(src_resource_id, "src_resource_id")

        edge.root = root
        edge.latest_leaf_index = latest_leaf_index
        if src_resource_id is not None:
            edge.src_resource_id = src_resource_id
        edge.root_history.push(root)

        logger.info(
            f"Tree {tree_id}: updated edge to chain {chain_id} "
            f"(leaf_index={latest_leaf_index}), root={to_hex(root)}"
        )
        self.recorder.record(
            "edge_updated",
            tree_id=tree_id,
            chain_id=chain_id,
            root=root,
            latest_leaf_index=latest_leaf_index,
        )
        return edge

    def insert(self, tree_id: int, leaf: bytes) -> bytes:
        self._edges_of(tree_id)
        return self.accumulator.insert(tree_id, leaf)

    # -- queries --------------------------------------------------------------

    def _edges_of(self, tree_id: int) -> dict[int, Edge]:
        try:
            return self._edges[tree_id]
        except KeyError:
            raise UnknownTreeException(tree_id) from None

    def is_linkable(self, tree_id: int) -> bool:
        return tree_id in self._edges

    def get_max_edges(self, tree_id: int) -> int:
        self._edges_of(tree_id)
        return self._max_edges[tree_id]

    def get_root(self, tree_id: int) -> bytes:
        return self.accumulator.get_root(tree_id)

    def has_edge(self, tree_id: int, chain_id: int) -> bool:
        return chain_id in self._edges_of(tree_id)

    def get_edge(self, tree_id: int, chain_id: int) -> Edge:
        """
        Raises:
            UnknownEdgeException: If the peer is not linked
        """
        try:
            return self._edges_of(tree_id)[chain_id]
        except KeyError:
            raise UnknownEdgeException(tree_id, chain_id) from None

    def get_neighbor_edges(self, tree_id: int) -> list[Edge]:
        """Edges in creation order."""
        return list(self._edges_of(tree_id).values())

    def get_neighbor_roots(self, tree_id: int) -> list[bytes]:
        """Each edge's current root, in edge creation order."""
        return [edge.root for edge in self.get_neighbor_edges(tree_id)]

    def is_known_neighbor_root(self, tree_id: int, chain_id: int, root: bytes) -> bool:
        """
        True if ``root`` is in the history of the edge to ``chain_id``.
        The all-zero element is never a known neighbor root.
        """
        if is_zero_element(root):
            return False
        edge = self._edges_of(tree_id).get(chain_id)
        return edge is not None and root in edge.root_history

    def is_known_root(self, tree_id: int, root: bytes) -> bool:
        """Known locally (current or recent root) or via any edge's history."""
        if self.accumulator.is_known_root(tree_id, root):
            return True
        return any(
            self.is_known_neighbor_root(tree_id, chain_id, root)
            for chain_id in self._edges_of(tree_id)
        )

    def ensure_max_edges(self, tree_id: int, num_roots: int) -> None:
        """
        A spend against a linkable tree carries its local root plus one
        root per edge slot.

        Raises:
            InvalidMerkleRootsException: Unless num_roots == max_edges + 1
        """
        expected = self.get_max_edges(tree_id) + 1
        if num_roots != expected:
            raise InvalidMerkleRootsException(tree_id, expected, num_roots)

    def ensure_known_neighbor_roots(self, tree_id: int, neighbor_roots: Sequence[bytes]) -> None:
        """
        ``neighbor_roots[i]`` must be a known root of the i-th edge. Slots
        beyond the number of existing edges are not checked here.

        Raises:
            InvalidMerkleRootsException: If fewer roots than edges are given
            InvalidNeighborRootException: On the first positional mismatch
        """
        edges = self.get_neighbor_edges(tree_id)
        if len(neighbor_roots) < len(edges):
            raise InvalidMerkleRootsException(tree_id, len(edges), len(neighbor_roots))
        for edge, root in zip(edges, neighbor_roots):
            if not self.is_known_neighbor_root(tree_id, edge.chain_id, root):
                raise InvalidNeighborRootException(tree_id, edge.chain_id, to_hex(root))
