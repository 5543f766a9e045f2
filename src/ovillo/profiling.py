"""Ovillo GrowthAccumulator — opt-in profiling for buffer growth.

This module provides accumulated metrics across buffers:
- Buffers created
- Growth events and the bytes they copied
- Bytes appended and finalize calls
- Peak capacity reached

Zero overhead when disabled (get_growth_accumulator() returns None).

Example:
    from ovillo import Buffer
    from ovillo.profiling import profiled_buffers

    with profiled_buffers() as metrics:
        buf = Buffer(4, 2.0)
        buf.push_string("hello world")

    print(metrics.summary())
    # {"total_ms": 0.02, "buffers_created": 1, "growth_count": 2, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class GrowthAccumulator:
    """Accumulated metrics for buffers used inside a profiled block.

    Attributes:
        start_time: Profiling start timestamp.
        buffers_created: Number of buffers constructed.
        growth_count: Number of reallocations.
        bytes_copied: Bytes moved by reallocations.
        bytes_appended: Bytes written by appends.
        finalize_calls: Number of borrowed and owned finalizations.
        peak_capacity: Largest capacity any buffer reached.

    """

    start_time: float = field(default_factory=perf_counter)
    buffers_created: int = 0
    growth_count: int = 0
    bytes_copied: int = 0
    bytes_appended: int = 0
    finalize_calls: int = 0
    peak_capacity: int = 0

    def record_create(self, capacity: int) -> None:
        self.buffers_created += 1
        self.peak_capacity = max(self.peak_capacity, capacity)

    def record_growth(self, old_capacity: int, new_capacity: int, copied: int) -> None:
        """Record a reallocation.

        Args:
            old_capacity: Capacity before growth.
            new_capacity: Capacity after growth.
            copied: Bytes carried over into the new block.

        """
        self.growth_count += 1
        self.bytes_copied += copied
        self.peak_capacity = max(self.peak_capacity, new_capacity)

    def record_append(self, count: int) -> None:
        self.bytes_appended += count

    def record_finalize(self) -> None:
        self.finalize_calls += 1

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    @property
    def copy_ratio(self) -> float:
        """Bytes copied by growth per byte appended (0.0 if nothing appended)."""
        if not self.bytes_appended:
            return 0.0
        return self.bytes_copied / self.bytes_appended

    def summary(self) -> dict[str, Any]:
        """Get summary of growth metrics.

        Returns:
            Dict with total_ms and every counter.

        """
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "buffers_created": self.buffers_created,
            "growth_count": self.growth_count,
            "bytes_copied": self.bytes_copied,
            "bytes_appended": self.bytes_appended,
            "finalize_calls": self.finalize_calls,
            "peak_capacity": self.peak_capacity,
        }


_accumulator: ContextVar[GrowthAccumulator | None] = ContextVar(
    "growth_accumulator",
    default=None,
)


def get_growth_accumulator() -> GrowthAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_buffers() -> Iterator[GrowthAccumulator]:
    """Context manager for profiled buffer use.

    Creates a GrowthAccumulator and makes it available via
    get_growth_accumulator() for the duration of the with block.

    Yields:
        GrowthAccumulator populated by buffer operations in the block.

    """
    acc = GrowthAccumulator()
    token: Token[GrowthAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)
