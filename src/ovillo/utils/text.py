"""Helpers for terminated byte strings."""

from __future__ import annotations

TERMINATOR = 0

BytesLike = bytes | bytearray | memoryview


def as_bytes(source: str | BytesLike, encoding: str = "utf-8") -> BytesLike:
    """Return a bytes-like object for source, encoding str input.

    Raises:
        TypeError: If source is neither str nor bytes-like
    """
    if isinstance(source, str):
        return source.encode(encoding)
    if isinstance(source, (bytes, bytearray, memoryview)):
        return source
    raise TypeError(f"expected str or bytes-like object, got {type(source).__name__}")


def terminated_length(source: BytesLike, terminator: int = TERMINATOR) -> int:
    """Number of bytes before the first terminator.

    A source with no terminator counts in full.

    Example:
        >>> terminated_length(b"abc\\x00def")
        3
        >>> terminated_length(b"abc")
        3
    """
    if isinstance(source, memoryview):
        source = source.tobytes()
    index = source.find(terminator)
    return len(source) if index < 0 else index
