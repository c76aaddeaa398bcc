"""
Event Recorder

Collects PoolEvents emitted by the accumulator, linkable tree, parameter
store and pools. Shared by every component of one PoolRuntime.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from core.schemas.canonical import canonicalize_value, dumps_canonical

from .models import EventKind, PoolEvent

logger = logging.getLogger(__name__)


def generate_event_id(kind: EventKind, sequence: int, data: dict[str, Any]) -> str:
    """
    Generate a deterministic event ID from kind, position and payload.

    Format: ev_{kind}_{hash_prefix}
    """
    stable_str = f"{kind}|{sequence}|{dumps_canonical(data)}"
    hash_hex = hashlib.sha256(stable_str.encode()).hexdigest()[:12]
    return f"ev_{kind}_{hash_hex}"


class EventRecorder:
    """
    Records pool events in order.

    Usage:
        recorder = EventRecorder()
        recorder.record("tree_created", tree_id=0, depth=3)
        events = recorder.get_events(kind="tree_created")
    """

    def __init__(self) -> None:
        self._events: list[PoolEvent] = []

    def record(
        self,
        kind: EventKind,
        /,
        *,
        tree_id: Optional[int] = None,
        **data: Any,
    ) -> PoolEvent:
        """
        Record an event. Bytes in ``data`` are stored as 0x-hex.
        """
        payload = canonicalize_value(data)
        sequence = len(self._events)
        event = PoolEvent(
            event_id=generate_event_id(kind, sequence, payload),
            sequence=sequence,
            kind=kind,
            tree_id=tree_id,
            data=payload,
            recorded_at=datetime.now(timezone.utc),
        )
        event.compute_hash()
        self._events.append(event)
        logger.debug(f"Recorded {event.event_id} (tree={tree_id})")
        return event

    def get_events(
        self,
        *,
        kind: Optional[EventKind] = None,
        tree_id: Optional[int] = None,
    ) -> list[PoolEvent]:
        """Get recorded events, optionally filtered by kind and tree."""
        return [
            e
            for e in self._events
            if (kind is None or e.kind == kind)
            and (tree_id is None or e.tree_id == tree_id)
        ]

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all events to JSON-serializable dicts."""
        return [e.model_dump(mode="json", exclude_none=True) for e in self._events]
