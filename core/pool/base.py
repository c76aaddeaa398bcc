"""
Shared pool plumbing: per-tree pool metadata, the pool's own account, and
the small pre-checks every variant reuses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.crypto.hashing import sha256
from core.linkable.tree import LinkableTree
from core.pool.engine import PreCheck, SpendEngine
from core.pool.variants import PoolVariant
from core.receipts.models import TransferInstruction
from core.receipts.recorder import EventRecorder
from core.schemas.element import ZERO_ELEMENT
from core.schemas.errors import TreeFullException, UnknownPoolException

logger = logging.getLogger(__name__)

NATIVE_ASSET = 0


def derive_pool_account(kind: str) -> bytes:
    """Deterministic 32-byte account that holds a pool kind's funds."""
    return sha256(b"linkpool/pool/" + kind.encode("utf-8"))


@dataclass(frozen=True)
class PoolMetadata:
    tree_id: int
    asset: int
    deposit_size: int = 0
    creator: Optional[bytes] = None


class BasePool:
    variant: PoolVariant

    def __init__(
        self,
        linkable: LinkableTree,
        engine: SpendEngine,
        *,
        zero_element: bytes = ZERO_ELEMENT,
        pool_account: Optional[bytes] = None,
        recorder: Optional[EventRecorder] = None,
    ) -> None:
        self.linkable = linkable
        self.engine = engine
        self.zero_element = zero_element
        self.pool_account = pool_account or derive_pool_account(self.kind)
        self.recorder = recorder or linkable.recorder
        self._pools: dict[int, PoolMetadata] = {}

    @property
    def kind(self) -> str:
        return self.variant.kind.value

    def get_pool(self, tree_id: int) -> PoolMetadata:
        """
        Raises:
            UnknownPoolException: If no pool of this kind owns the tree
        """
        try:
            return self._pools[tree_id]
        except KeyError:
            raise UnknownPoolException(tree_id, self.kind) from None

    def pool_ids(self) -> list[int]:
        return sorted(self._pools)

    def _register(self, metadata: PoolMetadata) -> None:
        self._pools[metadata.tree_id] = metadata
        logger.info(f"Created {self.kind} pool on tree {metadata.tree_id}")
        self.recorder.record(
            "pool_created",
            tree_id=metadata.tree_id,
            kind=self.kind,
            asset=metadata.asset,
            deposit_size=metadata.deposit_size,
        )

    def _require_capacity(self, tree_id: int, count: int) -> PreCheck:
        def check() -> None:
            accumulator = self.linkable.accumulator
            if accumulator.capacity_remaining(tree_id) < count:
                raise TreeFullException(tree_id, accumulator.get_tree(tree_id).max_leaves)

        return check


def transfer_if_positive(
    transfers: list[TransferInstruction],
    asset: int,
    source: bytes,
    destination: bytes,
    amount: int,
) -> None:
    if amount > 0:
        transfers.append(
            TransferInstruction(asset=asset, source=source, destination=destination, amount=amount)
        )
