"""StringBuilder for O(n) text accumulation.

A str-oriented facade over Buffer. Fragments are encoded once and copied
into a single growing block; build() decodes the block once at the end.
O(n) total vs O(n²) for repeated string concatenation.

Thread Safety:
StringBuilder instances are meant to be local to one producer
(a render or serialize call). No shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterable

from ovillo.allocator import Allocator
from ovillo.buffer import Buffer


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<h1>")
            >>> sb.append("Hello")
            >>> sb.append("</h1>")
            >>> sb.build()
            '<h1>Hello</h1>'

    Args:
        initial_capacity: Initial buffer capacity in bytes
        growth_factor: Buffer growth factor (> 1.0)
        encoding: Codec used for appended text and build()
        allocator: Memory provider for the underlying Buffer

    """

    __slots__ = ("_buffer", "_encoding")

    def __init__(
        self,
        initial_capacity: int | None = None,
        growth_factor: float | None = None,
        *,
        encoding: str = "utf-8",
        allocator: Allocator | None = None,
    ) -> None:
        self._buffer = Buffer(initial_capacity, growth_factor, allocator=allocator)
        self._encoding = encoding

    @property
    def buffer(self) -> Buffer:
        """The underlying Buffer."""
        return self._buffer

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder.

        Args:
            s: String to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._buffer.push_range(s.encode(self._encoding))
        return self

    def append_char(self, c: str) -> StringBuilder:
        """Append a single character.

        ASCII characters take the single-byte path; others are encoded.

        Raises:
            ValueError: If c is not exactly one character
        """
        if len(c) != 1:
            raise ValueError(f"expected a single character, got {c!r}")
        if c.isascii():
            self._buffer.push(ord(c))
        else:
            self._buffer.push_range(c.encode(self._encoding))
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append a string followed by newline.

        Args:
            s: String to append (empty = just newline)

        Returns:
            self for method chaining
        """
        if s:
            self._buffer.push_range(s.encode(self._encoding))
        self._buffer.push(0x0A)
        return self

    def extend(self, strings: Iterable[str]) -> StringBuilder:
        """Append multiple strings at once."""
        for s in strings:
            if s:
                self._buffer.push_range(s.encode(self._encoding))
        return self

    def build(self) -> str:
        """Decode all accumulated text into the final string."""
        return self._buffer.finalize_borrowed().decode(self._encoding)

    def clear(self) -> StringBuilder:
        """Discard accumulated text per the buffer's reset policy.

        Returns:
            self for method chaining
        """
        self._buffer.reset()
        return self

    def close(self) -> None:
        """Release the underlying Buffer."""
        self._buffer.release()

    def __enter__(self) -> StringBuilder:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        """Return the encoded length in bytes (not characters)."""
        return len(self._buffer)

    def __bool__(self) -> bool:
        """Return True if anything has been appended."""
        return bool(self._buffer)
