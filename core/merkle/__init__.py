"""
Module 02 - Merkle Accumulator and Reference Tree
Incremental fixed-depth Merkle trees + from-scratch rebuild and paths.

Owner: Protocol/Crypto Engineer
Module ID: M02

This module provides:
- MerkleAccumulator / TreeState: append-only trees with bounded root history
- RootHistory: the ring buffer behind every root history
- build_merkle_root / build_merkle_proof / verify_merkle_proof: reference
  rebuild used on the witness side and in tests

Usage:
    from core.merkle import MerkleAccumulator, build_merkle_root

    tree_id = accumulator.create(depth, zero_element, authorize=authorize)
    root = accumulator.insert(tree_id, leaf)
    assert root == build_merkle_root(leaves, depth, zero_element, hasher.hash_two)
"""
from .merkle_tree import (
    HashTwo,
    MerkleProof,
    compute_zero_hashes,
    build_merkle_root,
    build_merkle_proof,
    compute_root_from_path,
    verify_merkle_proof,
)
from .history import RootHistory
from .accumulator import (
    DEFAULT_MAX_TREE_DEPTH,
    DEFAULT_ROOT_HISTORY_SIZE,
    MerkleAccumulator,
    TreeState,
)


__all__ = [
    "HashTwo",
    "MerkleProof",
    "compute_zero_hashes",
    "build_merkle_root",
    "build_merkle_proof",
    "compute_root_from_path",
    "verify_merkle_proof",
    "RootHistory",
    "DEFAULT_MAX_TREE_DEPTH",
    "DEFAULT_ROOT_HISTORY_SIZE",
    "MerkleAccumulator",
    "TreeState",
]
