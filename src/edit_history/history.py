"""Bounded undo/redo history over a past ring, a current slot and a future stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar

from edit_history.buffers import CircularStack, FixedStack
from edit_history.runtime import telemetry
from edit_history.runtime.settings import load_settings

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class HistorySnapshot(Generic[T]):
    """Read-only copy of a history's containers."""

    capacity: int
    past: Tuple[T, ...]
    current: Optional[T]
    future: Tuple[T, ...]


class EditHistory(Generic[T]):
    """Manages undo/redo over a limited number of changes.

    Once ``capacity`` past changes are stored, pushing another one silently
    drops the oldest. ``None`` marks the absence of a value: ``peek`` before
    the first push, and ``pop``/``unpop`` when there is nothing to move.
    """

    def __init__(
        self, capacity: Optional[int] = None, *, logger_name: str | None = None
    ) -> None:
        if capacity is None:
            capacity = load_settings().default_capacity
        self._past: CircularStack[T] = CircularStack(capacity)
        self._future: FixedStack[T] = FixedStack(capacity)
        self._current: Optional[T] = None
        self._capacity: int = self._past.capacity
        self._logger_name = logger_name

    def push(self, item: T) -> None:
        """Archive the current change to the past and make ``item`` current.

        Clears every future change.
        """
        with telemetry.span(
            "history::push",
            logger_name=self._logger_name,
            component="history",
            metadata={"undo_amount": self.undo_amount},
        ):
            if self._current is not None:
                self._archive(self._current)
            self._future.clear()
            self._current = item

    def edit(self, item: T) -> None:
        """Replace the current change with ``item`` without archiving it.

        Clears every future change.
        """
        with telemetry.span(
            "history::edit",
            logger_name=self._logger_name,
            component="history",
        ):
            self._future.clear()
            self._current = item

    def peek(self) -> Optional[T]:
        return self._current

    def pop(self) -> Optional[T]:
        """Step back to the newest past change and return it.

        The change being left is kept on the future stack for ``unpop``.
        Returns ``None`` and changes nothing when there is no past change.
        """
        with telemetry.span(
            "history::pop",
            logger_name=self._logger_name,
            component="history",
        ) as handle:
            popped = self._past.pop()
            if popped is None:
                handle.add_metadata("result", "empty")
                return None
            if self._current is not None:
                self._future.push(self._current)
            self._current = popped
            return popped

    def undo(self) -> Optional[T]:
        return self.pop()

    def unpop(self) -> Optional[T]:
        """Step forward to the change most recently left by ``pop``.

        Returns ``None`` and changes nothing when there is no future change.
        """
        with telemetry.span(
            "history::unpop",
            logger_name=self._logger_name,
            component="history",
        ) as handle:
            popped = self._future.pop()
            if popped is None:
                handle.add_metadata("result", "empty")
                return None
            if self._current is not None:
                self._archive(self._current)
            self._current = popped
            return popped

    def redo(self) -> Optional[T]:
        return self.unpop()

    def can_undo(self) -> bool:
        return self._past.size > 0

    def can_redo(self) -> bool:
        return self._future.size > 0

    def clear(self) -> None:
        """Forget every change, returning to the freshly constructed state."""
        self._past.clear()
        self._future.clear()
        self._current = None

    def snapshot(self) -> HistorySnapshot[T]:
        return HistorySnapshot(
            capacity=self._capacity,
            past=tuple(self._past),
            current=self._current,
            future=tuple(self._future),
        )

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        """Number of past changes, i.e. how many times ``pop`` can succeed."""
        return self._past.size

    @property
    def undo_amount(self) -> int:
        return self.size

    @property
    def redo_amount(self) -> int:
        return self._future.size

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return (
            f"EditHistory(capacity={self._capacity}, "
            f"undo_amount={self.undo_amount}, redo_amount={self.redo_amount})"
        )

    def _archive(self, item: T) -> None:
        evicted = self._past.push(item)
        if evicted is not None:
            telemetry.record_event(
                "history.evicted",
                level="debug",
                data={"capacity": self._capacity},
                logger_name=self._logger_name,
            )


__all__ = ["EditHistory", "HistorySnapshot"]
