"""
Core Receipts Module

Receipts describe the outcome of pool commands (including the asset
transfers the host ledger must execute); events record every state
transition for auditing.
"""

from .models import (
    DepositReceipt,
    EventKind,
    PoolEvent,
    SpendReceipt,
    TransferInstruction,
    VariantName,
)
from .recorder import EventRecorder, generate_event_id

__all__ = [
    "DepositReceipt",
    "EventKind",
    "PoolEvent",
    "SpendReceipt",
    "TransferInstruction",
    "VariantName",
    "EventRecorder",
    "generate_event_id",
]
