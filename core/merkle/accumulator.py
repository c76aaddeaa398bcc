"""
Merkle Accumulator

Independently addressed, append-only, fixed-depth Merkle trees maintained
incrementally with a filled-subtree array: an insert costs depth hashes and
never revisits earlier leaves.

Owner: Protocol/Crypto Engineer

Per tree the accumulator keeps its depth, the next free leaf index, the
left-most filled subtree root at every level, the current root with a
bounded history of earlier roots, and the leaves themselves (served by
``get_leaves``). The hash function is taken from the ParameterStore on
every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from core.auth import Action, Authorizer, require
from core.crypto.hashing import to_hex
from core.merkle.history import RootHistory
from core.merkle.merkle_tree import compute_zero_hashes
from core.params.store import ParameterStore
from core.receipts.recorder import EventRecorder
from core.schemas.element import ensure_element
from core.schemas.errors import (
    InvalidDepthException,
    InvalidLeafRangeException,
    TreeFullException,
    UnknownTreeException,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TREE_DEPTH = 32
DEFAULT_ROOT_HISTORY_SIZE = 100


@dataclass
class TreeState:
    """Mutable state of one tree. Owned by the accumulator."""

    tree_id: int
    depth: int
    zero_element: bytes
    zero_hashes: list[bytes]
    filled_subtrees: list[bytes]
    current_root: bytes
    root_history: RootHistory
    leaves: list[bytes] = field(default_factory=list)

    @property
    def leaf_count(self) -> int:
        return len(self.leaves)

    @property
    def max_leaves(self) -> int:
        return 1 << self.depth

    @property
    def default_root(self) -> bytes:
        return self.zero_hashes[self.depth]

    @property
    def is_full(self) -> bool:
        return self.leaf_count >= self.max_leaves


class MerkleAccumulator:
    """
    Registry of incremental Merkle trees.

    Example:
        >>> acc = MerkleAccumulator(store)
        >>> tree_id = acc.create(3, ZERO_ELEMENT, authorize=allow_all)
        >>> new_root = acc.insert(tree_id, leaf)
    """

    def __init__(
        self,
        params: ParameterStore,
        *,
        max_tree_depth: int = DEFAULT_MAX_TREE_DEPTH,
        root_history_size: int = DEFAULT_ROOT_HISTORY_SIZE,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.params = params
        self.max_tree_depth = max_tree_depth
        self.root_history_size = root_history_size
        self.recorder = recorder or params.recorder
        self._trees: dict[int, TreeState] = {}
        self._next_tree_id = 0

    # -- commands -------------------------------------------------------------

    def create(self, depth: int, zero_element: bytes, *, authorize: Authorizer) -> int:
        """
        Allocate a new empty tree.

        Raises:
            UnauthorizedException: If the predicate refuses the action
            InvalidDepthException: If depth is 0 or exceeds max_tree_depth
            NotInitializedException: If hash parameters were never set
        """
        require(authorize, Action.CREATE_TREE)
        if depth < 1 or depth > self.max_tree_depth:
            raise InvalidDepthException(depth, self.max_tree_depth)
        zero_element = ensure_element(zero_element, "zero_element")

        hasher = self.params.get_hasher()
        zero_hashes = compute_zero_hashes(depth, zero_element, hasher.hash_two)

        tree_id = self._next_tree_id
        self._trees[tree_id] = TreeState(
            tree_id=tree_id,
            depth=depth,
            zero_element=zero_element,
            zero_hashes=zero_hashes,
            filled_subtrees=list(zero_hashes[:depth]),
            current_root=zero_hashes[depth],
            root_history=RootHistory(self.root_history_size),
        )
        self._next_tree_id += 1

        logger.info(f"Created tree {tree_id} (depth={depth})")
        self.recorder.record(
            "tree_created", tree_id=tree_id, depth=depth, root=zero_hashes[depth]
        )
        return tree_id

    def insert(self, tree_id: int, leaf: bytes) -> bytes:
        """
        Append a leaf and return the new root.

        Raises:
            UnknownTreeException: If the tree does not exist
            TreeFullException: If every leaf slot is taken
        """
        tree = self.get_tree(tree_id)
        leaf = ensure_element(leaf, "leaf")
        if tree.is_full:
            raise TreeFullException(tree_id, tree.max_leaves)

        hash_two = self.params.get_hasher().hash_two
        filled = list(tree.filled_subtrees)
        index = tree.leaf_count
        current = leaf
        for level in range(tree.depth):
            if index % 2 == 0:
                filled[level] = current
                current = hash_two(current, tree.zero_hashes[level])
            else:
                current = hash_two(filled[level], current)
            index //= 2

        leaf_index = tree.leaf_count
        tree.filled_subtrees = filled
        tree.current_root = current
        tree.root_history.push(current)
        tree.leaves.append(leaf)

        logger.debug(f"Inserted leaf {leaf_index} into tree {tree_id}, root={to_hex(current)}")
        self.recorder.record(
            "leaf_inserted", tree_id=tree_id, leaf_index=leaf_index, leaf=leaf, root=current
        )
        return current

    # -- queries --------------------------------------------------------------

    def get_tree(self, tree_id: int) -> TreeState:
        """
        Raises:
            UnknownTreeException: If the tree does not exist
        """
        try:
            return self._trees[tree_id]
        except KeyError:
            raise UnknownTreeException(tree_id) from None

    @property
    def next_tree_id(self) -> int:
        return self._next_tree_id

    def has_tree(self, tree_id: int) -> bool:
        return tree_id in self._trees

    def tree_ids(self) -> list[int]:
        return sorted(self._trees)

    def get_root(self, tree_id: int) -> bytes:
        return self.get_tree(tree_id).current_root

    def get_default_root(self, tree_id: int) -> bytes:
        return self.get_tree(tree_id).default_root

    def is_known_root(self, tree_id: int, root: bytes) -> bool:
        """Current root or any root still held in the tree's history."""
        tree = self.get_tree(tree_id)
        return root == tree.current_root or root in tree.root_history

    def get_leaves(self, tree_id: int, start: int, end: int) -> list[bytes]:
        """
        Leaves in the half-open index range [start, end).

        Raises:
            InvalidLeafRangeException: If the range is not within 0..leaf_count
        """
        tree = self.get_tree(tree_id)
        if start < 0 or start > end or end > tree.leaf_count:
            raise InvalidLeafRangeException(tree_id, start, end, tree.leaf_count)
        return tree.leaves[start:end]

    def capacity_remaining(self, tree_id: int) -> int:
        tree = self.get_tree(tree_id)
        return tree.max_leaves - tree.leaf_count
