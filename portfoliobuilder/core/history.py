"""Linear undo/redo timeline."""

from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_LIMIT = 100


class History(Generic[T]):
    """A single timeline of snapshots with a cursor.

    ``record`` drops everything after the cursor before appending, so making
    an edit after an undo discards the redo branch. When the timeline grows
    past ``limit`` entries the oldest ones are dropped first.
    """

    def __init__(self, initial: T, limit: int = DEFAULT_LIMIT) -> None:
        if limit < 1:
            raise ValueError("history limit must be at least 1")
        self.limit = limit
        self._entries: List[T] = [initial]
        self._position = 0

    @property
    def present(self) -> T:
        return self._entries[self._position]

    @property
    def position(self) -> int:
        return self._position

    @property
    def can_undo(self) -> bool:
        return self._position > 0

    @property
    def can_redo(self) -> bool:
        return self._position < len(self._entries) - 1

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, snapshot: T) -> None:
        del self._entries[self._position + 1:]
        self._entries.append(snapshot)
        overflow = len(self._entries) - self.limit
        if overflow > 0:
            del self._entries[:overflow]
        self._position = len(self._entries) - 1

    def undo(self) -> Optional[T]:
        if not self.can_undo:
            return None
        self._position -= 1
        return self._entries[self._position]

    def redo(self) -> Optional[T]:
        if not self.can_redo:
            return None
        self._position += 1
        return self._entries[self._position]

    def reset(self, snapshot: T) -> None:
        """Start a fresh timeline holding only ``snapshot``."""
        self._entries = [snapshot]
        self._position = 0
