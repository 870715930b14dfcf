"""Bounded undo/redo history for arbitrary values."""

from .buffers import (
    BufferCapacityError,
    BufferOverflowError,
    CircularStack,
    FixedStack,
)
from .history import EditHistory, HistorySnapshot

__all__ = [
    "EditHistory",
    "HistorySnapshot",
    "CircularStack",
    "FixedStack",
    "BufferCapacityError",
    "BufferOverflowError",
    "buffers",
    "runtime",
]

__version__ = "0.1.0"
