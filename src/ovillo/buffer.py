"""Growable byte buffer for amortized O(1) text accumulation.

A Buffer owns one contiguous block of ``capacity + 1`` bytes. Appends write
at the cursor; when the block is full it is replaced by a larger one
(``capacity * growth_factor``), so N appends cost O(N) copying in total
instead of O(N²) for repeated ``bytes`` concatenation.

The extra byte past ``capacity`` is reserved for the NUL terminator that
finalization writes, so a finalized buffer can be handed to code that
expects C-style strings without a further copy.

Lifecycle:
    create -> push / push_range / push_string -> (reset) -> finalize* -> release

Thread Safety:
    Not thread-safe. Exactly one owner may mutate a Buffer at a time, and
    borrowed views must not outlive the next mutating call.

Example:
    >>> buf = Buffer(4, 2.0)
    >>> buf.push_string("hello")
    >>> buf.length, buf.capacity
    (5, 8)
    >>> buf.finalize_owned()
    b'hello'

"""

from __future__ import annotations

import math
import sys
from typing import TYPE_CHECKING

from ovillo.allocator import Allocator, BytearrayAllocator
from ovillo.config import ResetPolicy, get_buffer_config, validate_options
from ovillo.errors import AllocationError, BufferReleasedError
from ovillo.profiling import get_growth_accumulator
from ovillo.utils.logger import get_logger
from ovillo.utils.text import TERMINATOR, as_bytes, terminated_length
from ovillo.view import BorrowedView

if TYPE_CHECKING:
    from ovillo.utils.text import BytesLike

logger = get_logger(__name__)

_DEFAULT_ALLOCATOR = BytearrayAllocator()


class Buffer:
    """Contiguous, growable byte buffer with a reserved terminator slot.

    Args:
        initial_capacity: Bytes to allocate up front, not counting the
            terminator slot. Defaults to the active BufferConfig.
        growth_factor: Multiplier (> 1.0) applied to capacity on overflow.
            Defaults to the active BufferConfig.
        reset_policy: What reset() does with the allocation.
        min_capacity: Smallest capacity a growth may produce.
        allocator: Memory provider (default: BytearrayAllocator).

    Raises:
        AllocationError: If the initial block cannot be allocated
        ValueError: If an option is out of range

    """

    __slots__ = (
        "_data",
        "_length",
        "_capacity",
        "_generation",
        "_initial_capacity",
        "_growth_factor",
        "_reset_policy",
        "_min_capacity",
        "_allocator",
    )

    def __init__(
        self,
        initial_capacity: int | None = None,
        growth_factor: float | None = None,
        *,
        reset_policy: ResetPolicy | None = None,
        min_capacity: int | None = None,
        allocator: Allocator | None = None,
    ) -> None:
        config = get_buffer_config()
        if initial_capacity is None:
            initial_capacity = config.initial_capacity
        if growth_factor is None:
            growth_factor = config.growth_factor
        if reset_policy is None:
            reset_policy = config.reset_policy
        if min_capacity is None:
            min_capacity = config.min_capacity
        validate_options(initial_capacity, growth_factor, reset_policy, min_capacity)

        self._allocator: Allocator = allocator if allocator is not None else _DEFAULT_ALLOCATOR
        self._initial_capacity = initial_capacity
        self._growth_factor = float(growth_factor)
        self._reset_policy = reset_policy
        self._min_capacity = min_capacity

        self._data: bytearray | None = self._allocate(initial_capacity + 1)
        self._capacity = initial_capacity
        self._length = 0
        self._generation = 0

        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_create(initial_capacity)

    @classmethod
    def create(
        cls,
        initial_capacity: int | None = None,
        growth_factor: float | None = None,
        **options: object,
    ) -> Buffer:
        """Construct a Buffer; same arguments as the constructor."""
        return cls(initial_capacity, growth_factor, **options)  # type: ignore[arg-type]

    # =========================================================================
    # Introspection
    # =========================================================================

    @property
    def length(self) -> int:
        """Bytes written so far."""
        self._check_alive()
        return self._length

    @property
    def capacity(self) -> int:
        """Bytes that fit before the next growth (terminator slot excluded)."""
        self._check_alive()
        return self._capacity

    @property
    def growth_factor(self) -> float:
        return self._growth_factor

    @property
    def reset_policy(self) -> ResetPolicy:
        return self._reset_policy

    @property
    def initial_capacity(self) -> int:
        return self._initial_capacity

    @property
    def min_capacity(self) -> int:
        return self._min_capacity

    @property
    def generation(self) -> int:
        """Counter bumped by every mutation; used to detect stale views."""
        return self._generation

    @property
    def is_released(self) -> bool:
        return self._data is None

    def __len__(self) -> int:
        return self.length

    def __bool__(self) -> bool:
        return self.length > 0

    def __repr__(self) -> str:
        if self._data is None:
            return "<Buffer released>"
        return (
            f"<Buffer length={self._length} capacity={self._capacity} "
            f"growth_factor={self._growth_factor}>"
        )

    # =========================================================================
    # Appending
    # =========================================================================

    def push(self, byte: int | BytesLike) -> None:
        """Append a single byte.

        Args:
            byte: An int in 0..255 or a bytes-like object of length 1

        Raises:
            AllocationError: If a needed growth fails (buffer unchanged)
        """
        self._check_alive()
        value = _byte_value(byte)
        if self._length == self._capacity:
            self._grow()
        self._data[self._length] = value  # type: ignore[index]
        self._length += 1
        self._generation += 1

        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_append(1)

    def push_range(self, source: BytesLike, count: int | None = None) -> None:
        """Append the first ``count`` bytes of source.

        Copies in chunks that exactly fill the free space, growing between
        chunks, so the final capacity never has to be computed up front.

        Args:
            source: Bytes-like object; need not be terminated
            count: Bytes to copy (default: all of source)

        Raises:
            ValueError: If count is negative or larger than source
            AllocationError: If a growth fails; the buffer is rolled back
                to its length before the call

        """
        self._check_alive()
        with memoryview(source) as mv, mv.cast("B") as src:
            total = len(src) if count is None else count
            if not 0 <= total <= len(src):
                raise ValueError(f"count must be in 0..{len(src)}, got {count}")
            if total == 0:
                return

            start = self._length
            self._generation += 1
            offset = 0
            remaining = total
            try:
                while remaining:
                    space_left = self._capacity - self._length
                    if space_left == 0:
                        self._grow()
                        space_left = self._capacity - self._length
                    chunk = min(space_left, remaining)
                    self._data[self._length : self._length + chunk] = src[offset : offset + chunk]  # type: ignore[index]
                    self._length += chunk
                    offset += chunk
                    remaining -= chunk
            except AllocationError:
                self._length = start
                raise

        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_append(total)

    def push_string(self, source: str | BytesLike) -> None:
        """Append source up to (not including) its first NUL byte.

        str input is encoded as UTF-8 first. A source without a NUL is
        appended whole.
        """
        data = as_bytes(source)
        self.push_range(data, terminated_length(data))

    # =========================================================================
    # Growth
    # =========================================================================

    def _next_capacity(self) -> int:
        old = self._capacity
        scaled = old * self._growth_factor
        if not math.isfinite(scaled):
            logger.debug("Growth from %d bytes overflows (factor %r)", old, self._growth_factor)
            raise AllocationError(sys.maxsize, "capacity overflow")
        return max(math.floor(scaled), old + 1, self._min_capacity)

    def _grow(self) -> None:
        """Replace the block with one of the next capacity.

        Copy-then-swap: the old block is released only after the new one
        holds every written byte, so a failure leaves the buffer usable.
        """
        old_capacity = self._capacity
        new_capacity = self._next_capacity()
        old_block = self._data
        try:
            new_block = self._allocator.reallocate(old_block, new_capacity + 1, self._length)  # type: ignore[arg-type]
        except AllocationError:
            logger.debug(
                "Growth %d -> %d failed; buffer kept at %d bytes",
                old_capacity,
                new_capacity,
                old_capacity,
            )
            raise

        self._data = new_block
        self._capacity = new_capacity
        self._generation += 1
        self._allocator.release(old_block)  # type: ignore[arg-type]

        logger.debug(
            "Buffer grew %d -> %d bytes (%d copied)", old_capacity, new_capacity, self._length
        )
        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_growth(old_capacity, new_capacity, self._length)

    # =========================================================================
    # Finalization
    # =========================================================================

    def finalize_borrowed(self) -> BorrowedView:
        """Terminate the content in place and return a view of it.

        The view is valid until the next append, reset or release.
        Calling this again without mutation yields an equal view.
        """
        self._check_alive()
        self._data[self._length] = TERMINATOR  # type: ignore[index]

        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_finalize()
        return BorrowedView(self, self._generation, self._length)

    def finalize_owned(self, *, terminated: bool = False) -> bytes:
        """Return an independent copy of the content.

        Args:
            terminated: Include the trailing NUL byte in the result

        Raises:
            AllocationError: If the copy cannot be allocated (buffer untouched)
        """
        self._check_alive()
        length = self._length
        self._data[length] = TERMINATOR  # type: ignore[index]
        try:
            block = self._allocator.allocate(length + 1)
        except AllocationError:
            logger.debug("Owned finalize of %d bytes failed", length)
            raise
        try:
            with memoryview(self._data) as src:
                block[: length + 1] = src[: length + 1]
            with memoryview(block) as out:
                result = out[: length + 1 if terminated else length].tobytes()
        finally:
            self._allocator.release(block)

        acc = get_growth_accumulator()
        if acc is not None:
            acc.record_finalize()
        return result

    # =========================================================================
    # Reset / release
    # =========================================================================

    def reset(self) -> None:
        """Discard the content according to the buffer's reset policy.

        RETAIN_CAPACITY keeps the block (O(1)); old bytes are overwritten
        by later appends. REALLOCATE_TO_INITIAL swaps in a fresh block of
        the initial capacity.

        Raises:
            AllocationError: Only under REALLOCATE_TO_INITIAL, if the fresh
                block cannot be allocated (buffer unchanged)
        """
        self._check_alive()
        if self._reset_policy is ResetPolicy.REALLOCATE_TO_INITIAL:
            old_block = self._data
            self._data = self._allocate(self._initial_capacity + 1)
            self._capacity = self._initial_capacity
            self._allocator.release(old_block)  # type: ignore[arg-type]
        self._length = 0
        self._generation += 1

    def release(self) -> None:
        """Return the block to the allocator. Safe to call more than once."""
        if self._data is None:
            return
        block = self._data
        self._data = None
        self._generation += 1
        self._allocator.release(block)

    def __enter__(self) -> Buffer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    # =========================================================================
    # Internals
    # =========================================================================

    def _allocate(self, size: int) -> bytearray:
        try:
            return self._allocator.allocate(size)
        except AllocationError:
            logger.debug("Allocation of %d bytes failed", size)
            raise

    def _check_alive(self) -> None:
        if self._data is None:
            raise BufferReleasedError("Buffer used after release()")


def _byte_value(byte: int | BytesLike) -> int:
    if isinstance(byte, int) and not isinstance(byte, bool):
        if not 0 <= byte <= 255:
            raise ValueError(f"byte must be in range(0, 256), got {byte}")
        return byte
    if isinstance(byte, memoryview):
        with byte.cast("B") as raw:
            if len(raw) != 1:
                raise ValueError(f"expected a single byte, got {len(raw)}")
            return raw[0]
    if isinstance(byte, (bytes, bytearray)):
        if len(byte) != 1:
            raise ValueError(f"expected a single byte, got {len(byte)}")
        return byte[0]
    raise TypeError(f"expected int or bytes-like object, got {type(byte).__name__}")


__all__ = ["Buffer"]
