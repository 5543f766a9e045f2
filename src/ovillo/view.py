"""Borrowed views of a Buffer's contents.

A BorrowedView reads straight from the owning Buffer's storage without
copying. It records the buffer generation it was taken at; once the
buffer is appended to, reset, grown or released, every access raises
StaleViewError instead of returning bytes that may have moved.

Thread Safety:
    A view is only as safe as its buffer. Do not read a view on one
    thread while another thread mutates the buffer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, overload

from ovillo.errors import StaleViewError

if TYPE_CHECKING:
    from ovillo.buffer import Buffer


class BorrowedView:
    """Read-only, generation-checked view of finalized buffer contents.

    Usage:
        >>> buf = Buffer(8, 2.0)
        >>> buf.push_string("abc")
        >>> view = buf.finalize_borrowed()
        >>> bytes(view)
        b'abc'
        >>> buf.push(b"d")
        >>> view.is_valid
        False
    """

    __slots__ = ("_buffer", "_generation", "_length")

    def __init__(self, buffer: Buffer, generation: int, length: int) -> None:
        self._buffer = buffer
        self._generation = generation
        self._length = length

    @property
    def is_valid(self) -> bool:
        """True while the owning buffer is unchanged since finalization."""
        buf = self._buffer
        return not buf.is_released and buf.generation == self._generation

    def _storage(self) -> memoryview:
        buf = self._buffer
        if buf.is_released:
            raise StaleViewError(self._generation, None)
        if buf.generation != self._generation:
            raise StaleViewError(self._generation, buf.generation)
        return memoryview(buf._data)

    def tobytes(self) -> bytes:
        """Copy the viewed content (terminator excluded) into bytes."""
        with self._storage() as mv:
            return mv[: self._length].tobytes()

    def terminated(self) -> bytes:
        """Copy the viewed content including its trailing terminator."""
        with self._storage() as mv:
            return mv[: self._length + 1].tobytes()

    def decode(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self.tobytes().decode(encoding, errors)

    def __bytes__(self) -> bytes:
        return self.tobytes()

    def __str__(self) -> str:
        return self.decode()

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> bytes: ...

    def __getitem__(self, index: int | slice) -> int | bytes:
        with self._storage() as mv:
            if isinstance(index, slice):
                return mv[: self._length][index].tobytes()
            if not -self._length <= index < self._length:
                raise IndexError("view index out of range")
            return mv[index % self._length]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BorrowedView):
            return self.tobytes() == other.tobytes()
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        state = "valid" if self.is_valid else "stale"
        return f"<BorrowedView length={self._length} generation={self._generation} {state}>"
