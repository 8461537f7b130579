from collections import deque
from typing import Iterator

from aicc.domain.constants import HISTORY_CAPACITY
from aicc.domain.models.conversation import ConversationEntry


class ConversationStore:
    """Bounded, append-only record of executed requests.

    Holds at most ``capacity`` entries; appending to a full store evicts the
    oldest entry first. Entries are only removed by eviction or clear().
    Single writer: the owning orchestrator.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._entries: deque[ConversationEntry] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def append(self, entry: ConversationEntry) -> None:
        self._entries.append(entry)

    def snapshot(self) -> tuple[ConversationEntry, ...]:
        """Entries oldest first, detached from later mutation."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def last(self) -> ConversationEntry | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ConversationEntry]:
        return iter(self.snapshot())
