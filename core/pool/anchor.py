"""
Fixed-denomination anchor.

A mixer whose tree is linkable: a withdraw carries the local root plus one
root per edge slot and may be proven against a note deposited on any
linked chain. The local typed chain id is part of the public inputs so a
proof cannot be replayed on another chain.

A withdraw with a non-zero refresh commitment re-inserts that commitment
into the tree instead of paying the denomination out.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.auth import Action, Authorizer, require
from core.pool.base import NATIVE_ASSET, PoolMetadata, transfer_if_positive
from core.pool.engine import PreCheck
from core.pool.mixer import MixerPool
from core.pool.variants import ANCHOR
from core.receipts.models import SpendReceipt, TransferInstruction
from core.schemas.errors import InvalidDepositAmountException, InvalidFeeException
from core.schemas.inputs import SpendInputs, WithdrawRequest, compute_arbitrary_data_hash

logger = logging.getLogger(__name__)


class AnchorPool(MixerPool):
    variant = ANCHOR

    def create(
        self,
        deposit_size: int,
        depth: int,
        max_edges: int = 1,
        *,
        asset: int = NATIVE_ASSET,
        creator: Optional[bytes] = None,
        authorize: Authorizer,
    ) -> int:
        require(authorize, Action.CREATE_POOL)
        if deposit_size <= 0:
            raise InvalidDepositAmountException(
                f"Deposit size must be positive, got {deposit_size}"
            )
        tree_id = self.linkable.create(depth, self.zero_element, max_edges, authorize=authorize)
        self._register(
            PoolMetadata(tree_id=tree_id, asset=asset, deposit_size=deposit_size, creator=creator)
        )
        return tree_id

    def arbitrary_data_hash(self, request: WithdrawRequest) -> bytes:
        return compute_arbitrary_data_hash(
            request.recipient,
            request.relayer,
            request.fee,
            request.refund,
            request.refresh_commitment,
        )

    def build_inputs(self, request: WithdrawRequest) -> SpendInputs:
        return SpendInputs(
            roots=request.roots,
            nullifiers=[request.nullifier_hash],
            arbitrary_data_hash=self.arbitrary_data_hash(request),
            chain_id_type=self.linkable.chain_id_type,
        )

    def withdraw_prechecks(self, pool: PoolMetadata, request: WithdrawRequest) -> list[PreCheck]:
        checks = super().withdraw_prechecks(pool, request)
        if request.is_refresh:
            checks.append(self._refresh_fee_check(request))
            checks.append(self._require_capacity(pool.tree_id, 1))
        return checks

    def _refresh_fee_check(self, request: WithdrawRequest) -> PreCheck:
        # the refreshed note keeps the full denomination, so nothing may leave the pool
        def check() -> None:
            if request.fee != 0:
                raise InvalidFeeException(
                    "A refresh cannot pay a relayer fee out of the pool",
                    details={"fee": request.fee},
                )

        return check

    def settle(
        self,
        pool: PoolMetadata,
        caller: bytes,
        request: WithdrawRequest,
        receipt: SpendReceipt,
    ) -> None:
        if not request.is_refresh:
            super().settle(pool, caller, request, receipt)
            return

        root = self.linkable.insert(pool.tree_id, request.refresh_commitment)
        receipt.inserted_leaves = [request.refresh_commitment]
        receipt.new_root = root

        transfers: list[TransferInstruction] = []
        transfer_if_positive(transfers, NATIVE_ASSET, caller, request.recipient, request.refund)
        receipt.transfers = transfers

        logger.info(f"Tree {pool.tree_id}: note refreshed")
        self.recorder.record(
            "refresh",
            tree_id=pool.tree_id,
            nullifier=request.nullifier_hash,
            commitment=request.refresh_commitment,
        )
