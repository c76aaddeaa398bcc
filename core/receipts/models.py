"""
Receipt and Event Models

Schemas for what the pool core hands to its collaborators:

- TransferInstruction: one asset movement the host ledger must execute
- DepositReceipt / SpendReceipt: the outcome of a successful command
- PoolEvent: an audit record of a state transition

Key Design Principles:
1. The core never moves assets itself; receipts describe transfers
2. Event payloads are canonicalized on record, so data_hash is stable
3. Timestamps are non-committed metadata, excluded from data_hash
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import hash_canonical, to_hex
from core.schemas.element import ElementField
from core.schemas.inputs import AccountId


EventKind = Literal[
    "tree_created",
    "leaf_inserted",
    "edge_added",
    "edge_updated",
    "hash_parameters_set",
    "verifying_material_set",
    "maintainer_set",
    "pool_created",
    "deposit",
    "withdraw",
    "refresh",
    "transaction",
    "amount_limits_set",
]

VariantName = Literal["mixer", "anchor", "vanchor"]


class TransferInstruction(BaseModel):
    """An asset transfer the host ledger executes on behalf of the pool."""

    model_config = ConfigDict(extra="forbid")

    asset: int = Field(..., ge=0, description="Asset id (0 is the native asset)")
    source: AccountId = Field(..., description="Debited account")
    destination: AccountId = Field(..., description="Credited account")
    amount: int = Field(..., gt=0, description="Amount in the asset's base unit")


class DepositReceipt(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tree_id: int
    leaf: ElementField
    leaf_index: int = Field(..., ge=0)
    root: ElementField = Field(..., description="Tree root after the insert")
    transfers: list[TransferInstruction] = Field(default_factory=list)


class SpendReceipt(BaseModel):
    """
    Outcome of a successful verify_and_spend.

    The engine fills in what it checked and committed; the pool variant
    appends transfers and any leaves it inserted afterwards.
    """

    model_config = ConfigDict(extra="forbid")

    tree_id: int
    variant: VariantName
    arity: tuple[int, int] = Field(..., description="Verifying-material key used")
    roots: list[ElementField] = Field(..., description="Roots the proof was checked against")
    nullifiers: list[ElementField] = Field(..., description="Nullifiers committed as spent")
    inserted_leaves: list[ElementField] = Field(default_factory=list)
    new_root: Optional[ElementField] = Field(
        default=None,
        description="Tree root after inserted_leaves, when any were inserted",
    )
    transfers: list[TransferInstruction] = Field(default_factory=list)


class PoolEvent(BaseModel):
    """Audit record of one state transition."""

    model_config = ConfigDict(extra="forbid")

    event_id: str = Field(..., description="Deterministic event identifier")
    sequence: int = Field(..., ge=0, description="Position in the recorder's log")
    kind: EventKind
    tree_id: Optional[int] = Field(default=None)
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Canonicalized event payload",
    )
    data_hash: Optional[str] = Field(
        default=None,
        description="Hash of canonical data (0x-prefixed)",
    )
    recorded_at: Optional[datetime] = Field(
        default=None,
        description="Wall-clock time (non-committed)",
    )

    def compute_hash(self) -> "PoolEvent":
        if self.data_hash is None:
            self.data_hash = to_hex(hash_canonical(self.data))
        return self
