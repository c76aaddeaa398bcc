"""
Module 02 - Reference Merkle Tree
Fixed-depth Merkle root computation, path generation and verification.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module rebuilds a tree from scratch out of its full leaf list. It is
the witness-side counterpart of the incremental accumulator: for any
prefix of inserted leaves the two must agree on the root.

Commitment Rules (Hard Contracts):
1. The tree has exactly 2^depth leaf slots
2. Unfilled slots hold the tree's zero element
3. Parent hashing: parent = hash_two(left, right), hash_two supplied by caller
4. zero_hashes[0] = zero_element, zero_hashes[i+1] = hash_two(z_i, z_i)
5. Empty tree: root = zero_hashes[depth]

Determinism Notes:
- Leaf ordering is insertion order; this module never sorts leaves
- Levels that are entirely empty are never hashed, they are read from
  zero_hashes, so a rebuild costs O(n * depth) rather than O(2^depth)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

HashTwo = Callable[[bytes, bytes], bytes]


@dataclass(frozen=True)
class MerkleProof:
    """
    Inclusion path for a single leaf of a fixed-depth tree.

    Attributes:
        leaf: The leaf being proven
        index: 0-based leaf index; bit i selects the side at level i
        siblings: Sibling hashes from the leaf level up, len == depth
        root: The root this path commits to
    """
    leaf: bytes
    index: int
    siblings: list[bytes]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        if self.index >= 1 << len(self.siblings):
            raise ValueError(
                f"Leaf index {self.index} does not fit a tree of depth {len(self.siblings)}"
            )

    @property
    def depth(self) -> int:
        return len(self.siblings)


def compute_zero_hashes(depth: int, zero_element: bytes, hash_two: HashTwo) -> list[bytes]:
    """
    Roots of empty subtrees of height 0..depth.

    Returns:
        depth + 1 elements; the last one is the empty-tree root
    """
    zero_hashes = [zero_element]
    for _ in range(depth):
        zero_hashes.append(hash_two(zero_hashes[-1], zero_hashes[-1]))
    return zero_hashes


def _next_level(level: list[bytes], zero: bytes, hash_two: HashTwo) -> list[bytes]:
    if len(level) % 2 == 1:
        level = level + [zero]
    return [hash_two(level[i], level[i + 1]) for i in range(0, len(level), 2)]


def _check_capacity(num_leaves: int, depth: int) -> None:
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    if num_leaves > 1 << depth:
        raise ValueError(f"{num_leaves} leaves do not fit a tree of depth {depth}")


def build_merkle_root(
    leaves: Sequence[bytes],
    depth: int,
    zero_element: bytes,
    hash_two: HashTwo,
) -> bytes:
    """
    Build the root of a depth-``depth`` tree whose first slots hold ``leaves``.

    Raises:
        ValueError: If more than 2^depth leaves are given

    Example:
        >>> build_merkle_root([], 3, z, h) == compute_zero_hashes(3, z, h)[3]
        True
    """
    _check_capacity(len(leaves), depth)
    zero_hashes = compute_zero_hashes(depth, zero_element, hash_two)
    if not leaves:
        return zero_hashes[depth]

    level: list[bytes] = list(leaves)
    for height in range(depth):
        level = _next_level(level, zero_hashes[height], hash_two)
    return level[0]


def build_merkle_proof(
    leaves: Sequence[bytes],
    index: int,
    depth: int,
    zero_element: bytes,
    hash_two: HashTwo,
) -> MerkleProof:
    """
    Generate the inclusion path for the leaf at ``index``.

    Siblings that fall in the unfilled part of the tree are the matching
    zero hashes.

    Raises:
        IndexError: If index is out of range
        ValueError: If more than 2^depth leaves are given
    """
    _check_capacity(len(leaves), depth)
    if index < 0 or index >= len(leaves):
        raise IndexError(f"Leaf index {index} out of range for {len(leaves)} leaves")

    zero_hashes = compute_zero_hashes(depth, zero_element, hash_two)
    siblings: list[bytes] = []
    level: list[bytes] = list(leaves)
    position = index

    for height in range(depth):
        sibling = position ^ 1
        siblings.append(level[sibling] if sibling < len(level) else zero_hashes[height])
        level = _next_level(level, zero_hashes[height], hash_two)
        position //= 2

    return MerkleProof(leaf=leaves[index], index=index, siblings=siblings, root=level[0])


def compute_root_from_path(leaf: bytes, index: int, siblings: Sequence[bytes], hash_two: HashTwo) -> bytes:
    current = leaf
    for sibling in siblings:
        if index % 2 == 0:
            current = hash_two(current, sibling)
        else:
            current = hash_two(sibling, current)
        index //= 2
    return current


def verify_merkle_proof(proof: MerkleProof, hash_two: HashTwo) -> bool:
    """
    Recompute the root from the leaf and its siblings and compare it with
    the root recorded in the proof.
    """
    return compute_root_from_path(proof.leaf, proof.index, proof.siblings, hash_two) == proof.root


__all__ = [
    "HashTwo",
    "MerkleProof",
    "compute_zero_hashes",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_path",
    "verify_merkle_proof",
]
