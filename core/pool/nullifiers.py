"""
Spent-nullifier registry.

Per tree, a monotonically growing set of nullifier hashes. Nothing is
ever removed: a nullifier recorded once blocks every later spend that
reveals it on the same tree.
"""

from __future__ import annotations

from typing import Iterable

from core.crypto.hashing import to_hex
from core.schemas.errors import NullifierAlreadySpentException


class NullifierRegistry:
    def __init__(self) -> None:
        self._spent: dict[int, set[bytes]] = {}

    def is_spent(self, tree_id: int, nullifier: bytes) -> bool:
        return nullifier in self._spent.get(tree_id, ())

    def ensure_unspent(self, tree_id: int, nullifier: bytes) -> None:
        if self.is_spent(tree_id, nullifier):
            raise NullifierAlreadySpentException(tree_id, to_hex(nullifier))

    def commit(self, tree_id: int, nullifiers: Iterable[bytes]) -> None:
        """
        Record nullifiers as spent. Either all are recorded or none.

        Raises:
            NullifierAlreadySpentException: If any is already spent
        """
        batch = list(nullifiers)
        for nullifier in batch:
            self.ensure_unspent(tree_id, nullifier)
        self._spent.setdefault(tree_id, set()).update(batch)

    def spent(self, tree_id: int) -> list[bytes]:
        return sorted(self._spent.get(tree_id, ()))

    def count(self, tree_id: int) -> int:
        return len(self._spent.get(tree_id, ()))
