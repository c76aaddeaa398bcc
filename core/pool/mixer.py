"""
Fixed-denomination mixer.

Every deposit inserts one commitment and moves exactly ``deposit_size`` of
the pool's asset into the pool account. A withdraw proves membership of
some commitment under a recent local root, reveals its nullifier, and
pays ``deposit_size - fee`` to the recipient and ``fee`` to the relayer.
The recipient, relayer, fee and refund are bound to the proof through the
arbitrary data hash.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.auth import Action, Authorizer, require
from core.pool.base import NATIVE_ASSET, BasePool, PoolMetadata, transfer_if_positive
from core.pool.engine import PreCheck
from core.pool.variants import MIXER
from core.receipts.models import DepositReceipt, SpendReceipt, TransferInstruction
from core.schemas.element import ensure_element
from core.schemas.errors import (
    InvalidDepositAmountException,
    InvalidFeeException,
    SchemaValidationException,
)
from core.schemas.inputs import SpendInputs, WithdrawRequest, compute_arbitrary_data_hash

logger = logging.getLogger(__name__)


class MixerPool(BasePool):
    variant = MIXER

    def create(
        self,
        deposit_size: int,
        depth: int,
        *,
        asset: int = NATIVE_ASSET,
        creator: Optional[bytes] = None,
        authorize: Authorizer,
    ) -> int:
        """
        Raises:
            UnauthorizedException: If the predicate refuses the action
            InvalidDepositAmountException: If deposit_size is not positive
            plus everything LinkableTree.create raises
        """
        require(authorize, Action.CREATE_POOL)
        if deposit_size <= 0:
            raise InvalidDepositAmountException(
                f"Deposit size must be positive, got {deposit_size}"
            )
        tree_id = self.linkable.create(depth, self.zero_element, 0, authorize=authorize)
        self._register(
            PoolMetadata(tree_id=tree_id, asset=asset, deposit_size=deposit_size, creator=creator)
        )
        return tree_id

    def deposit(self, depositor: bytes, tree_id: int, leaf: bytes) -> DepositReceipt:
        """
        Insert a commitment and charge the depositor one denomination.

        Raises:
            UnknownPoolException: If the tree has no pool of this kind
            TreeFullException: If the tree is full
        """
        pool = self.get_pool(tree_id)
        depositor = ensure_element(depositor, "depositor")
        leaf = ensure_element(leaf, "leaf")
        leaf_index = self.linkable.accumulator.get_tree(tree_id).leaf_count
        root = self.linkable.insert(tree_id, leaf)

        self.recorder.record(
            "deposit", tree_id=tree_id, kind=self.kind, leaf=leaf, leaf_index=leaf_index
        )
        return DepositReceipt(
            tree_id=tree_id,
            leaf=leaf,
            leaf_index=leaf_index,
            root=root,
            transfers=[
                TransferInstruction(
                    asset=pool.asset,
                    source=depositor,
                    destination=self.pool_account,
                    amount=pool.deposit_size,
                )
            ],
        )

    def arbitrary_data_hash(self, request: WithdrawRequest) -> bytes:
        return compute_arbitrary_data_hash(
            request.recipient, request.relayer, request.fee, request.refund
        )

    def build_inputs(self, request: WithdrawRequest) -> SpendInputs:
        if request.is_refresh:
            raise SchemaValidationException(
                f"{self.kind} withdrawals cannot refresh a commitment",
                field_path="refresh_commitment",
            )
        return SpendInputs(
            roots=request.roots,
            nullifiers=[request.nullifier_hash],
            arbitrary_data_hash=self.arbitrary_data_hash(request),
        )

    def withdraw_prechecks(self, pool: PoolMetadata, request: WithdrawRequest) -> list[PreCheck]:
        def check_fee() -> None:
            if request.fee > pool.deposit_size:
                raise InvalidFeeException(
                    f"Fee {request.fee} exceeds deposit size {pool.deposit_size}",
                    details={"fee": request.fee, "deposit_size": pool.deposit_size},
                )

        return [check_fee]

    def withdraw(self, caller: bytes, tree_id: int, request: WithdrawRequest) -> SpendReceipt:
        """
        Spend one note.

        Raises:
            UnknownPoolException: If the tree has no pool of this kind
            InvalidFeeException: If fee exceeds the denomination
            plus everything SpendEngine.verify_and_spend raises
        """
        pool = self.get_pool(tree_id)
        caller = ensure_element(caller, "caller")
        inputs = self.build_inputs(request)

        receipt = self.engine.verify_and_spend(
            tree_id,
            request.proof,
            inputs,
            self.variant,
            prechecks=self.withdraw_prechecks(pool, request),
        )
        self.settle(pool, caller, request, receipt)
        return receipt

    def settle(
        self,
        pool: PoolMetadata,
        caller: bytes,
        request: WithdrawRequest,
        receipt: SpendReceipt,
    ) -> None:
        transfers: list[TransferInstruction] = []
        transfer_if_positive(
            transfers, pool.asset, self.pool_account, request.recipient,
            pool.deposit_size - request.fee,
        )
        transfer_if_positive(
            transfers, pool.asset, self.pool_account, request.relayer, request.fee
        )
        transfer_if_positive(transfers, NATIVE_ASSET, caller, request.recipient, request.refund)
        receipt.transfers = transfers

        self.recorder.record(
            "withdraw",
            tree_id=pool.tree_id,
            kind=self.kind,
            nullifier=request.nullifier_hash,
            recipient=request.recipient,
            relayer=request.relayer,
            fee=request.fee,
        )
