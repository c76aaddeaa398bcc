"""
Pool Runtime

Wires one parameter store, accumulator, linkable tree, nullifier registry,
spend engine and the three pool kinds together from a RuntimeConfig, and
exposes the persisted layout as a snapshot.

Usage:
    runtime = PoolRuntime.from_config(RuntimeConfig.from_yaml("linkpool.yaml"))
    tree_id = runtime.mixer.create(10**18, 20, authorize=authorize)
    digest = runtime.state_digest()
"""

from __future__ import annotations

import logging
from typing import Optional

from core.auth import allow_all
from core.config.runtime import RuntimeConfig, get_default_config
from core.crypto.hasher import get_hasher_backend
from core.crypto.hashing import from_hex, hash_canonical
from core.crypto.verifier import Verifier, get_verifier_backend
from core.linkable.tree import LinkableTree
from core.merkle.accumulator import MerkleAccumulator
from core.params.store import ParameterStore
from core.pool.anchor import AnchorPool
from core.pool.base import BasePool
from core.pool.engine import SpendEngine
from core.pool.mixer import MixerPool
from core.pool.nullifiers import NullifierRegistry
from core.pool.vanchor import VAnchorPool
from core.receipts.recorder import EventRecorder
from core.schemas.element import ensure_element
from core.schemas.state import (
    EdgeSnapshot,
    ParamsSnapshot,
    PoolSnapshot,
    RuntimeSnapshot,
    TreeSnapshot,
    VAnchorLimitsSnapshot,
    VerifyingMaterialSnapshot,
)

logger = logging.getLogger(__name__)


class PoolRuntime:
    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        verifier_backend: Optional[Verifier] = None,
    ) -> None:
        config = config or get_default_config()
        self.config = config
        self.recorder = EventRecorder()

        self.params = ParameterStore(
            hasher_factory=get_hasher_backend(config.params.hasher),
            verifier_backend=verifier_backend or get_verifier_backend(config.params.verifier),
            maintainer=(
                ensure_element(config.params.maintainer, "params.maintainer")
                if config.params.maintainer
                else None
            ),
            recorder=self.recorder,
        )
        if config.params.hash_parameters:
            # configuration is trusted genesis input
            self.params.set_hash_parameters(
                from_hex(config.params.hash_parameters), authorize=allow_all
            )

        self.accumulator = MerkleAccumulator(
            self.params,
            max_tree_depth=config.tree.max_tree_depth,
            root_history_size=config.tree.root_history_size,
            recorder=self.recorder,
        )
        self.linkable = LinkableTree(
            self.accumulator,
            chain_id=config.linkable.chain_id,
            chain_type=from_hex(config.linkable.chain_type),
            edge_history_length=config.linkable.edge_history_length,
            recorder=self.recorder,
        )
        self.nullifiers = NullifierRegistry()
        self.engine = SpendEngine(self.linkable, self.params, self.nullifiers)

        zero_element = ensure_element(config.tree.zero_element, "tree.zero_element")
        self.mixer = MixerPool(self.linkable, self.engine, zero_element=zero_element)
        self.anchor = AnchorPool(self.linkable, self.engine, zero_element=zero_element)
        self.vanchor = VAnchorPool(
            self.linkable,
            self.engine,
            zero_element=zero_element,
            max_fee=config.vanchor.max_fee,
            max_ext_amount=config.vanchor.max_ext_amount,
            max_deposit_amount=config.vanchor.max_deposit_amount,
            min_withdraw_amount=config.vanchor.min_withdraw_amount,
        )
        logger.info(
            f"Pool runtime ready (chain_id={config.linkable.chain_id}, "
            f"hasher={config.params.hasher}, verifier={config.params.verifier})"
        )

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> "PoolRuntime":
        return cls(config)

    @property
    def pools(self) -> list[BasePool]:
        return [self.mixer, self.anchor, self.vanchor]

    def pool_kind(self, tree_id: int) -> Optional[str]:
        for pool in self.pools:
            if tree_id in pool.pool_ids():
                return pool.kind
        return None

    # -- snapshot -------------------------------------------------------------

    def tree_snapshot(self, tree_id: int) -> TreeSnapshot:
        tree = self.accumulator.get_tree(tree_id)
        linkable = self.linkable.is_linkable(tree_id)
        edges = self.linkable.get_neighbor_edges(tree_id) if linkable else []
        return TreeSnapshot(
            tree_id=tree_id,
            depth=tree.depth,
            leaf_count=tree.leaf_count,
            max_leaves=tree.max_leaves,
            zero_element=tree.zero_element,
            current_root=tree.current_root,
            default_root=tree.default_root,
            filled_subtrees=list(tree.filled_subtrees),
            root_history=list(tree.root_history),
            leaves=list(tree.leaves),
            max_edges=self.linkable.get_max_edges(tree_id) if linkable else None,
            edges=[
                EdgeSnapshot(
                    chain_id=edge.chain_id,
                    root=edge.root,
                    latest_leaf_index=edge.latest_leaf_index,
                    src_resource_id=edge.src_resource_id,
                    root_history=list(edge.root_history),
                )
                for edge in edges
            ],
            nullifiers=self.nullifiers.spent(tree_id),
        )

    def snapshot(self) -> RuntimeSnapshot:
        factory = self.params.hasher_factory
        return RuntimeSnapshot(
            chain_id=self.linkable.chain_id,
            chain_type=self.linkable.chain_type,
            chain_id_type=self.linkable.chain_id_type,
            next_tree_id=self.accumulator.next_tree_id,
            trees=[self.tree_snapshot(tree_id) for tree_id in self.accumulator.tree_ids()],
            params=ParamsSnapshot(
                hasher=getattr(factory, "name", repr(factory)),
                hash_parameters=self.params.hash_parameters,
                verifying_material=[
                    VerifyingMaterialSnapshot(arity=arity, material=material)
                    for arity, material in self.params.verifying_material_items()
                ],
                maintainer=self.params.maintainer,
            ),
            pools=[
                PoolSnapshot(
                    tree_id=tree_id,
                    kind=pool.kind,
                    asset=pool.get_pool(tree_id).asset,
                    deposit_size=pool.get_pool(tree_id).deposit_size,
                )
                for pool in self.pools
                for tree_id in pool.pool_ids()
            ],
            vanchor_limits=VAnchorLimitsSnapshot(
                max_fee=self.vanchor.max_fee,
                max_ext_amount=self.vanchor.max_ext_amount,
                max_deposit_amount=self.vanchor.max_deposit_amount,
                min_withdraw_amount=self.vanchor.min_withdraw_amount,
                proposal_nonce=self.vanchor.proposal_nonce,
            ),
        )

    def state_digest(self) -> bytes:
        """sha256 of the snapshot's canonical JSON."""
        return hash_canonical(self.snapshot())
