"""
Bounded root history.

A fixed-capacity ring buffer of recent roots. Pushing into a full buffer
overwrites the oldest entry; membership is "appears in the current
contents". Used for a tree's own recent roots and for each edge's
recently synchronized neighbor roots.
"""

from __future__ import annotations

from typing import Iterator, Optional


class RootHistory:
    """
    Ring buffer of roots.

    Example:
        >>> history = RootHistory(2)
        >>> history.push(a); history.push(b); history.push(c)
        >>> a in history, c in history
        (False, True)
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Root history capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: list[Optional[bytes]] = [None] * capacity
        self._cursor = 0
        self._size = 0

    def push(self, root: bytes) -> None:
        self._slots[self._cursor] = root
        self._cursor = (self._cursor + 1) % self.capacity
        self._size = min(self._size + 1, self.capacity)

    def __contains__(self, root: object) -> bool:
        return root is not None and root in self._slots

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[bytes]:
        """Roots from oldest to newest."""
        start = self._cursor if self._size == self.capacity else 0
        for offset in range(self._size):
            root = self._slots[(start + offset) % self.capacity]
            if root is not None:
                yield root

    @property
    def latest(self) -> Optional[bytes]:
        if self._size == 0:
            return None
        return self._slots[(self._cursor - 1) % self.capacity]

    def __repr__(self) -> str:
        return f"RootHistory(capacity={self.capacity}, size={self._size})"
