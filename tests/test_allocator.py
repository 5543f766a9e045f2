"""Tests for ovillo.allocator and allocation-failure handling.

Every failing allocation must raise AllocationError and leave the
buffer exactly as usable as it was before the call.
"""

import pytest

from ovillo import (
    AllocationError,
    Allocator,
    Buffer,
    BudgetAllocator,
    BytearrayAllocator,
    ResetPolicy,
)


class TestBytearrayAllocator:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(BytearrayAllocator(), Allocator)
        assert isinstance(BudgetAllocator(10), Allocator)

    def test_allocate_zero_filled(self) -> None:
        block = BytearrayAllocator().allocate(4)
        assert block == bytearray(4)

    def test_reallocate_copies_used_prefix(self) -> None:
        alloc = BytearrayAllocator()
        old = bytearray(b"abcd")
        new = alloc.reallocate(old, 8, 3)
        assert len(new) == 8
        assert new[:3] == b"abc"
        assert new[3:] == bytearray(5)
        assert old == b"abcd"
        assert new is not old

    def test_impossible_request_raises_allocation_error(self) -> None:
        with pytest.raises(AllocationError) as exc_info:
            BytearrayAllocator().allocate(2**62)
        assert exc_info.value.requested == 2**62

    def test_huge_buffer_raises_allocation_error(self) -> None:
        with pytest.raises(AllocationError):
            Buffer(2**62, 2.0)


class TestBudgetAllocator:
    def test_tracks_usage(self) -> None:
        alloc = BudgetAllocator(100)
        block = alloc.allocate(30)
        assert alloc.in_use == 30
        assert alloc.available == 70
        alloc.release(block)
        assert alloc.in_use == 0
        assert alloc.peak == 30

    def test_refuses_over_budget(self) -> None:
        alloc = BudgetAllocator(10)
        with pytest.raises(AllocationError) as exc_info:
            alloc.allocate(11)
        assert exc_info.value.limit == 10
        assert alloc.in_use == 0
        assert alloc.failures == 1

    def test_negative_limit(self) -> None:
        with pytest.raises(ValueError):
            BudgetAllocator(-1)

    def test_buffer_lifecycle_balances(self) -> None:
        alloc = BudgetAllocator(1000)
        buf = Buffer(4, 2.0, allocator=alloc)
        buf.push_range(b"x" * 100)
        buf.finalize_owned()
        buf.release()
        assert alloc.in_use == 0

    def test_growth_needs_room_for_both_blocks(self) -> None:
        alloc = BudgetAllocator(30)
        buf = Buffer(8, 2.0, allocator=alloc)
        buf.push_range(b"x" * 9)
        # old (9) + new (17) outstanding during the copy
        assert alloc.peak == 26
        assert alloc.in_use == 17


class TestAllocationFailure:
    def test_create_fails_cleanly(self) -> None:
        alloc = BudgetAllocator(50)
        with pytest.raises(AllocationError) as exc_info:
            Buffer(100, 2.0, allocator=alloc)
        assert exc_info.value.requested == 101
        assert alloc.in_use == 0

    def test_push_growth_failure_keeps_buffer(self) -> None:
        alloc = BudgetAllocator(20)
        buf = Buffer(8, 2.0, allocator=alloc)
        buf.push_range(b"abcdefgh")
        with pytest.raises(AllocationError):
            buf.push(b"i")
        assert buf.length == 8
        assert buf.capacity == 8
        assert buf.finalize_owned() == b"abcdefgh"

    def test_push_range_failure_rolls_back(self) -> None:
        alloc = BudgetAllocator(20)
        buf = Buffer(8, 2.0, allocator=alloc)
        buf.push_range(b"abc")
        with pytest.raises(AllocationError):
            buf.push_range(b"x" * 10)
        assert buf.length == 3
        assert buf.capacity == 8
        assert buf.finalize_owned() == b"abc"

    def test_buffer_usable_after_failure(self) -> None:
        alloc = BudgetAllocator(20)
        buf = Buffer(8, 2.0, allocator=alloc)
        with pytest.raises(AllocationError):
            buf.push_range(b"x" * 9)
        buf.push_range(b"ok")
        assert buf.finalize_owned() == b"ok"

    def test_finalize_owned_failure_keeps_buffer(self) -> None:
        alloc = BudgetAllocator(12)
        buf = Buffer(8, 2.0, allocator=alloc)
        buf.push_range(b"abc")
        with pytest.raises(AllocationError):
            buf.finalize_owned()
        assert bytes(buf.finalize_borrowed()) == b"abc"
        assert not buf.is_released
        assert alloc.in_use == 9

    def test_reallocating_reset_failure_keeps_buffer(self) -> None:
        alloc = BudgetAllocator(30)
        buf = Buffer(4, 2.0, reset_policy=ResetPolicy.REALLOCATE_TO_INITIAL, allocator=alloc)
        buf.push_range(b"0123456789")
        assert buf.capacity == 16
        other = Buffer(8, 2.0, allocator=alloc)
        with pytest.raises(AllocationError):
            buf.reset()
        assert buf.length == 10
        assert buf.capacity == 16
        assert bytes(buf.finalize_borrowed()) == b"0123456789"
        other.release()
        buf.reset()
        assert buf.capacity == 4
        assert buf.length == 0

    def test_is_memory_error(self) -> None:
        alloc = BudgetAllocator(0)
        with pytest.raises(MemoryError):
            Buffer(0, 2.0, allocator=alloc)
