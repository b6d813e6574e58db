"""
Bounded undo history of board snapshots.
"""

from collections import deque
from typing import NamedTuple

from numpy import ndarray


class Snapshot(NamedTuple):
    """
    State restored by an undo.

    Attributes
    ----------
    cells : ndarray
        Read-only copy of the grid before the move.
    tile_count : int
        Number of tiles before the move.
    score : int
        Score before the move.
    """

    cells: ndarray
    tile_count: int
    score: int


class UndoHistory:
    """
    Stack of snapshots holding at most ``limit`` entries.

    Pushing onto a full history evicts the oldest snapshot. A limit of 0 disables undo: every push is dropped.
    """

    def __init__(self, limit: int = 1):
        if limit < 0:
            raise ValueError(f'limit must be >= 0, got {limit}')
        self._entries: deque[Snapshot] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen

    def push(self, snapshot: Snapshot) -> None:
        self._entries.append(snapshot)

    def pop(self) -> Snapshot | None:
        """Remove and return the most recent snapshot, or None when the history is empty."""
        if not self._entries:
            return None
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
