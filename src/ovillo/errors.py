"""Exception classes for Ovillo.

Provides standardized exceptions for error handling throughout Ovillo.
"""

from __future__ import annotations


class OvilloError(Exception):
    """Base exception for all Ovillo errors.

    Subclass this for specific error categories.
    """

    pass


class AllocationError(OvilloError, MemoryError):
    """The allocator could not satisfy a request.

    Raised by buffer construction, growth, owned finalization and
    reallocating resets. The buffer involved is left unchanged, so the
    caller may release other memory and retry.
    """

    def __init__(
        self,
        requested: int,
        message: str | None = None,
        limit: int | None = None,
    ) -> None:
        """Initialize allocation error.

        Args:
            requested: Number of bytes that could not be allocated
            message: Optional detail from the allocator
            limit: Byte budget that would have been exceeded (optional)
        """
        self.requested = requested
        self.limit = limit

        text = f"Cannot allocate {requested} bytes"
        if limit is not None:
            text += f" (budget {limit} bytes)"
        if message:
            text += f": {message}"
        super().__init__(text)


class BufferReleasedError(OvilloError):
    """Operation attempted on a buffer that was already released."""

    pass


class StaleViewError(OvilloError):
    """A borrowed view was used after its buffer changed.

    Views returned by ``Buffer.finalize_borrowed()`` are valid only until
    the next append, reset or release of the owning buffer.
    """

    def __init__(self, taken_at: int, current: int | None) -> None:
        """Initialize stale view error.

        Args:
            taken_at: Buffer generation when the view was created
            current: Buffer generation now (None once released)
        """
        self.taken_at = taken_at
        self.current = current

        if current is None:
            reason = "buffer was released"
        else:
            reason = f"buffer changed (generation {taken_at} -> {current})"
        super().__init__(f"Borrowed view is stale: {reason}")
