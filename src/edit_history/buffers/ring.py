"""Fixed-capacity ring buffer with stack-style access."""

from __future__ import annotations

from typing import Generic, Iterator, List, Optional, TypeVar

from .validation import ensure_capacity

T = TypeVar("T")


class CircularStack(Generic[T]):
    """LIFO buffer that overwrites its oldest entry once full.

    Storage is a list allocated once at ``capacity`` slots; ``_head`` is the
    slot the next push writes to and ``_count`` the number of live entries.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = ensure_capacity(capacity)
        self._items: List[Optional[T]] = [None] * self._capacity
        self._head = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def push(self, item: T) -> Optional[T]:
        """Store ``item`` as the newest entry.

        Returns the entry that was overwritten when the buffer was full,
        otherwise ``None``.
        """
        evicted: Optional[T] = None
        if self._count == self._capacity:
            evicted = self._items[self._head]
        else:
            self._count += 1
        self._items[self._head] = item
        self._head = (self._head + 1) % self._capacity
        return evicted

    def pop(self) -> Optional[T]:
        if self._count == 0:
            return None
        self._head = (self._head - 1) % self._capacity
        item = self._items[self._head]
        self._items[self._head] = None
        self._count -= 1
        return item

    def peek(self) -> Optional[T]:
        if self._count == 0:
            return None
        return self._items[(self._head - 1) % self._capacity]

    def clear(self) -> None:
        self._items = [None] * self._capacity
        self._head = 0
        self._count = 0

    def __iter__(self) -> Iterator[T]:
        """Yield entries oldest to newest."""
        start = (self._head - self._count) % self._capacity
        for offset in range(self._count):
            yield self._items[(start + offset) % self._capacity]  # type: ignore[misc]

    def to_list(self) -> List[T]:
        return list(self)

    def __repr__(self) -> str:
        return f"CircularStack(capacity={self._capacity}, size={self._count})"
