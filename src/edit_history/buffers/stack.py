"""Fixed-capacity stack that refuses to grow past its bound."""

from __future__ import annotations

from typing import Generic, Iterator, List, Optional, TypeVar

from .validation import BufferOverflowError, ensure_capacity

T = TypeVar("T")


class FixedStack(Generic[T]):
    """LIFO stack over a preallocated list of ``capacity`` slots."""

    def __init__(self, capacity: int) -> None:
        self._capacity = ensure_capacity(capacity)
        self._items: List[Optional[T]] = [None] * self._capacity
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count

    def push(self, item: T) -> int:
        if self._count == self._capacity:
            raise BufferOverflowError(
                f"FixedStack is full (capacity {self._capacity})",
                capacity=self._capacity,
            )
        self._items[self._count] = item
        self._count += 1
        return self._count

    def pop(self) -> Optional[T]:
        if self._count == 0:
            return None
        self._count -= 1
        item = self._items[self._count]
        self._items[self._count] = None
        return item

    def peek(self) -> Optional[T]:
        if self._count == 0:
            return None
        return self._items[self._count - 1]

    def clear(self) -> None:
        for index in range(self._count):
            self._items[index] = None
        self._count = 0

    def __iter__(self) -> Iterator[T]:
        """Yield entries bottom to top."""
        for index in range(self._count):
            yield self._items[index]  # type: ignore[misc]

    def to_list(self) -> List[T]:
        return list(self)

    def __repr__(self) -> str:
        return f"FixedStack(capacity={self._capacity}, size={self._count})"
