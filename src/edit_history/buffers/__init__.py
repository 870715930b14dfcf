"""Fixed-capacity containers backing the edit history."""

from .ring import CircularStack
from .stack import FixedStack
from .validation import BufferCapacityError, BufferOverflowError, ensure_capacity

__all__ = [
    "CircularStack",
    "FixedStack",
    "BufferCapacityError",
    "BufferOverflowError",
    "ensure_capacity",
]
