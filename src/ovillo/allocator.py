"""Memory providers for Ovillo buffers.

A Buffer never creates its storage directly; it asks an Allocator. This
keeps the one fallible operation (getting memory) behind a single seam so
callers can plug in quotas, arenas, or instrumentation.

Two providers are included:

- ``BytearrayAllocator``: plain ``bytearray`` storage (the default).
- ``BudgetAllocator``: the same storage, refusing any request that would
  push the outstanding total past a fixed byte budget.

Thread Safety:
    BytearrayAllocator is stateless and may be shared. BudgetAllocator
    keeps a running total and is not thread-safe; give each thread its
    own instance or wrap calls in a lock.

"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ovillo.errors import AllocationError


@runtime_checkable
class Allocator(Protocol):
    """Protocol for buffer memory providers.

    Every method that hands out memory must either return a block of
    exactly the requested size or raise AllocationError. A failed call
    must leave every previously returned block intact.
    """

    def allocate(self, size: int) -> bytearray:
        """Return a new zero-filled block of ``size`` bytes."""
        ...

    def reallocate(self, block: bytearray, size: int, used: int) -> bytearray:
        """Return a new block of ``size`` bytes holding ``block[:used]``.

        The old block stays valid; the caller releases it once the new
        one has been installed.
        """
        ...

    def release(self, block: bytearray) -> None:
        """Give a block back. The caller must not touch it afterwards."""
        ...


class BytearrayAllocator:
    """Allocator backed by Python ``bytearray`` objects."""

    __slots__ = ()

    def allocate(self, size: int) -> bytearray:
        try:
            return bytearray(size)
        except (MemoryError, OverflowError) as e:
            raise AllocationError(size, str(e) or type(e).__name__) from e

    def reallocate(self, block: bytearray, size: int, used: int) -> bytearray:
        new_block = self.allocate(size)
        new_block[:used] = memoryview(block)[:used]
        return new_block

    def release(self, block: bytearray) -> None:
        # Storage is reclaimed by the garbage collector once unreferenced.
        return None


class BudgetAllocator(BytearrayAllocator):
    """Allocator that refuses to exceed a fixed number of outstanding bytes.

    Usage:
        >>> alloc = BudgetAllocator(64)
        >>> buf = Buffer(16, 2.0, allocator=alloc)   # 17 bytes outstanding
        >>> buf.push_range(b"x" * 100)
        Traceback (most recent call last):
        ...
        ovillo.errors.AllocationError: Cannot allocate 65 bytes (budget 64 bytes)

    During a reallocation the old and new blocks are both outstanding,
    so growth needs room for both.
    """

    __slots__ = ("limit", "in_use", "peak", "failures")

    def __init__(self, limit: int) -> None:
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self.limit = limit
        self.in_use = 0
        self.peak = 0
        self.failures = 0

    @property
    def available(self) -> int:
        """Bytes that can still be handed out."""
        return self.limit - self.in_use

    def allocate(self, size: int) -> bytearray:
        if size > self.available:
            self.failures += 1
            raise AllocationError(size, limit=self.limit)
        block = super().allocate(size)
        self.in_use += size
        self.peak = max(self.peak, self.in_use)
        return block

    def release(self, block: bytearray) -> None:
        self.in_use -= len(block)


__all__ = [
    "Allocator",
    "BudgetAllocator",
    "BytearrayAllocator",
]
