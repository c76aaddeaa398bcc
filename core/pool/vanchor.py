"""
Variable-amount anchor.

A transaction spends 2 or 16 input notes and creates 2 output notes. The
net value entering (ext_amount > 0) or leaving (ext_amount < 0) the pool,
the relayer fee and the recipient live in the external data, which the
proof is bound to through ext_data_hash. The circuit sees
public_amount = ext_amount - fee as a field element.

Checks that do not need the proof (external data hash, fee and amount
limits, tree capacity for the outputs) run before verification; once the
nullifiers are committed the outputs are inserted and transfers issued.

Amount limits are pool-wide and changed through nonce-ordered proposals:
a proposal nonce is accepted only if current < nonce <= current + 1048.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.auth import Action, Authorizer, require
from core.pool.base import NATIVE_ASSET, BasePool, PoolMetadata, transfer_if_positive
from core.pool.engine import PreCheck
from core.pool.variants import VANCHOR
from core.receipts.models import SpendReceipt, TransferInstruction
from core.schemas.element import element_from_int, ensure_element
from core.schemas.errors import (
    InvalidDepositAmountException,
    InvalidExtAmountException,
    InvalidExtDataException,
    InvalidFeeException,
    InvalidNonceException,
    InvalidParametersException,
    InvalidPublicAmountException,
    InvalidWithdrawAmountException,
)
from core.schemas.inputs import U128_MAX, ExtData, ProofData, SpendInputs

logger = logging.getLogger(__name__)

NONCE_WINDOW = 1048


class VAnchorPool(BasePool):
    variant = VANCHOR

    def __init__(
        self,
        *args,
        max_fee: int = U128_MAX,
        max_ext_amount: int = U128_MAX,
        max_deposit_amount: int = U128_MAX,
        min_withdraw_amount: int = 0,
        **kwargs,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.max_fee = max_fee
        self.max_ext_amount = max_ext_amount
        self.max_deposit_amount = max_deposit_amount
        self.min_withdraw_amount = min_withdraw_amount
        self.proposal_nonce = 0

    # -- governance -----------------------------------------------------------

    def create(
        self,
        depth: int,
        max_edges: int = 1,
        *,
        asset: int = NATIVE_ASSET,
        creator: Optional[bytes] = None,
        authorize: Authorizer,
    ) -> int:
        require(authorize, Action.CREATE_POOL)
        tree_id = self.linkable.create(depth, self.zero_element, max_edges, authorize=authorize)
        self._register(PoolMetadata(tree_id=tree_id, asset=asset, creator=creator))
        return tree_id

    def _accept_nonce(self, nonce: int) -> None:
        current = self.proposal_nonce
        if not current < nonce <= current + NONCE_WINDOW:
            raise InvalidNonceException(current, nonce)
        self.proposal_nonce = nonce

    @staticmethod
    def _check_balance(name: str, amount: int) -> None:
        if not 0 <= amount <= U128_MAX:
            raise InvalidParametersException(
                f"{name} must be within 0..2^128-1, got {amount}",
                details={name: amount},
            )

    def set_max_deposit_amount(self, amount: int, nonce: int, *, authorize: Authorizer) -> None:
        """
        Raises:
            UnauthorizedException: If the predicate refuses the action
            InvalidParametersException: If amount is not a u128 balance
            InvalidNonceException: If nonce is outside the accepted window
        """
        require(authorize, Action.SET_AMOUNT_LIMITS)
        self._check_balance("max_deposit_amount", amount)
        self._accept_nonce(nonce)
        self.max_deposit_amount = amount
        logger.info(f"Max deposit amount set to {amount} (nonce {nonce})")
        self.recorder.record("amount_limits_set", max_deposit_amount=amount, nonce=nonce)

    def set_min_withdraw_amount(self, amount: int, nonce: int, *, authorize: Authorizer) -> None:
        require(authorize, Action.SET_AMOUNT_LIMITS)
        self._check_balance("min_withdraw_amount", amount)
        self._accept_nonce(nonce)
        self.min_withdraw_amount = amount
        logger.info(f"Min withdraw amount set to {amount} (nonce {nonce})")
        self.recorder.record("amount_limits_set", min_withdraw_amount=amount, nonce=nonce)

    # -- transact -------------------------------------------------------------

    def build_inputs(self, proof_data: ProofData) -> SpendInputs:
        return SpendInputs(
            roots=proof_data.roots,
            nullifiers=proof_data.input_nullifiers,
            public_amount=proof_data.public_amount,
            ext_data_hash=proof_data.ext_data_hash,
            output_commitments=proof_data.output_commitments,
            chain_id_type=self.linkable.chain_id_type,
        )

    def transact_prechecks(
        self,
        pool: PoolMetadata,
        proof_data: ProofData,
        ext_data: ExtData,
    ) -> list[PreCheck]:
        def check_ext_data() -> None:
            if ext_data.compute_hash() != proof_data.ext_data_hash:
                raise InvalidExtDataException("External data hash does not match the proof")
            if ext_data.token != pool.asset:
                raise InvalidExtDataException(
                    f"Token {ext_data.token} is not the pool asset {pool.asset}",
                    details={"token": ext_data.token, "asset": pool.asset},
                )

        def check_amounts() -> None:
            if ext_data.fee >= self.max_fee:
                raise InvalidFeeException(
                    f"Fee {ext_data.fee} must be below {self.max_fee}",
                    details={"fee": ext_data.fee},
                )
            if abs(ext_data.ext_amount) >= self.max_ext_amount:
                raise InvalidExtAmountException(
                    f"|ext_amount| must be below {self.max_ext_amount}",
                    details={"ext_amount": ext_data.ext_amount},
                )
            expected = element_from_int(ext_data.ext_amount - ext_data.fee)
            if proof_data.public_amount != expected:
                raise InvalidPublicAmountException(
                    "public_amount does not equal ext_amount - fee",
                    details={"ext_amount": ext_data.ext_amount, "fee": ext_data.fee},
                )

        def check_limits() -> None:
            amount = abs(ext_data.ext_amount)
            if ext_data.ext_amount > 0 and amount > self.max_deposit_amount:
                raise InvalidDepositAmountException(
                    f"Deposit {amount} exceeds {self.max_deposit_amount}",
                    details={"amount": amount},
                )
            if ext_data.ext_amount < 0 and amount < self.min_withdraw_amount:
                raise InvalidWithdrawAmountException(
                    f"Withdraw {amount} is below {self.min_withdraw_amount}",
                    details={"amount": amount},
                )

        return [
            check_ext_data,
            check_amounts,
            check_limits,
            self._require_capacity(pool.tree_id, len(proof_data.output_commitments)),
        ]

    def transact(
        self,
        transactor: bytes,
        tree_id: int,
        proof_data: ProofData,
        ext_data: ExtData,
    ) -> SpendReceipt:
        """
        Spend input notes, create output notes and move the external amount.

        Raises:
            UnknownPoolException: If the tree has no variable anchor
            InvalidExtDataException, InvalidFeeException,
            InvalidExtAmountException, InvalidPublicAmountException,
            InvalidDepositAmountException, InvalidWithdrawAmountException,
            TreeFullException, plus everything SpendEngine.verify_and_spend raises
        """
        pool = self.get_pool(tree_id)
        transactor = ensure_element(transactor, "transactor")
        inputs = self.build_inputs(proof_data)

        receipt = self.engine.verify_and_spend(
            tree_id,
            proof_data.proof,
            inputs,
            self.variant,
            prechecks=self.transact_prechecks(pool, proof_data, ext_data),
        )

        transfers: list[TransferInstruction] = []
        amount = abs(ext_data.ext_amount)
        if ext_data.ext_amount > 0:
            transfer_if_positive(transfers, pool.asset, transactor, self.pool_account, amount)
        elif ext_data.ext_amount < 0:
            transfer_if_positive(transfers, pool.asset, self.pool_account, ext_data.recipient, amount)
        transfer_if_positive(
            transfers, pool.asset, self.pool_account, ext_data.relayer, ext_data.fee
        )
        transfer_if_positive(
            transfers, NATIVE_ASSET, transactor, ext_data.recipient, ext_data.refund
        )
        receipt.transfers = transfers

        root = None
        for commitment in proof_data.output_commitments:
            root = self.linkable.insert(tree_id, commitment)
        receipt.inserted_leaves = list(proof_data.output_commitments)
        receipt.new_root = root

        self.recorder.record(
            "transaction",
            tree_id=tree_id,
            transactor=transactor,
            leaves=list(proof_data.output_commitments),
            amount=ext_data.ext_amount - ext_data.fee,
        )
        return receipt
