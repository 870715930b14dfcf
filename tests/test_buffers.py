import pytest

from edit_history.buffers import (
    BufferCapacityError,
    BufferOverflowError,
    CircularStack,
    FixedStack,
    ensure_capacity,
)


def make_ring(*items: int, capacity: int = 3) -> CircularStack[int]:
    ring: CircularStack[int] = CircularStack(capacity)
    for item in items:
        ring.push(item)
    return ring


def make_stack(*items: int, capacity: int = 3) -> FixedStack[int]:
    stack: FixedStack[int] = FixedStack(capacity)
    for item in items:
        stack.push(item)
    return stack


@pytest.mark.parametrize("capacity", [0, -1, -100])
def test_ensure_capacity_rejects_non_positive(capacity: int) -> None:
    with pytest.raises(BufferCapacityError) as excinfo:
        ensure_capacity(capacity)
    assert excinfo.value.capacity == capacity


@pytest.mark.parametrize("capacity", [True, 2.0, "3", None])
def test_ensure_capacity_rejects_non_integers(capacity: object) -> None:
    with pytest.raises(BufferCapacityError):
        ensure_capacity(capacity)


def test_capacity_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        CircularStack(0)
    with pytest.raises(ValueError):
        FixedStack(-5)


def test_ring_pops_newest_first() -> None:
    ring = make_ring(1, 2, 3)

    assert ring.pop() == 3
    assert ring.pop() == 2
    assert ring.pop() == 1
    assert ring.pop() is None
    assert ring.size == 0


def test_ring_overwrites_oldest_when_full() -> None:
    ring = make_ring(1, 2, 3)

    evicted = ring.push(4)

    assert evicted == 1
    assert ring.size == 3
    assert ring.to_list() == [2, 3, 4]
    assert [ring.pop(), ring.pop(), ring.pop(), ring.pop()] == [4, 3, 2, None]


def test_ring_push_below_capacity_evicts_nothing() -> None:
    ring = make_ring(1)

    assert ring.push(2) is None
    assert len(ring) == 2


def test_ring_wraps_repeatedly() -> None:
    ring = make_ring(*range(10), capacity=4)

    assert ring.to_list() == [6, 7, 8, 9]
    assert ring.peek() == 9
    ring.pop()
    ring.push(42)
    assert ring.to_list() == [6, 7, 8, 42]


def test_ring_peek_does_not_remove() -> None:
    ring = make_ring(5, 6)

    assert ring.peek() == 6
    assert ring.size == 2
    assert make_ring().peek() is None


def test_ring_clear_resets_state() -> None:
    ring = make_ring(1, 2, 3, 4)

    ring.clear()

    assert ring.size == 0
    assert ring.pop() is None
    ring.push(9)
    assert ring.to_list() == [9]


def test_fixed_stack_is_lifo() -> None:
    stack = make_stack(1, 2)

    assert stack.peek() == 2
    assert stack.pop() == 2
    assert stack.pop() == 1
    assert stack.pop() is None


def test_fixed_stack_push_returns_size() -> None:
    stack = make_stack()

    assert stack.push(10) == 1
    assert stack.push(20) == 2


def test_fixed_stack_overflow_raises() -> None:
    stack = make_stack(1, 2, 3)

    with pytest.raises(BufferOverflowError) as excinfo:
        stack.push(4)

    assert excinfo.value.capacity == 3
    assert stack.to_list() == [1, 2, 3]


def test_fixed_stack_clear() -> None:
    stack = make_stack(1, 2, 3)

    stack.clear()

    assert len(stack) == 0
    assert stack.peek() is None
    assert stack.capacity == 3
