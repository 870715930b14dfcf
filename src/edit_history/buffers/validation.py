"""Validation helpers and errors shared by the fixed-capacity buffers."""

from __future__ import annotations

from typing import Any


class BufferCapacityError(ValueError):
    """Raised when a buffer is constructed with an unusable capacity."""

    def __init__(self, message: str, *, capacity: Any = None) -> None:
        super().__init__(message)
        self.capacity = capacity


class BufferOverflowError(RuntimeError):
    """Raised when pushing onto a full fixed stack."""

    def __init__(self, message: str, *, capacity: int | None = None) -> None:
        super().__init__(message)
        self.capacity = capacity


def ensure_capacity(capacity: Any) -> int:
    # bool is an int subclass; True would otherwise pass as capacity 1
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise BufferCapacityError(
            f"Capacity must be an integer, got {type(capacity).__name__}",
            capacity=capacity,
        )
    if capacity <= 0:
        raise BufferCapacityError(
            f"Capacity must be positive, got {capacity}", capacity=capacity
        )
    return capacity
