"""
Ovillo — Growable String Buffers for Python

A contiguous byte buffer with amortized O(1) appends, a configurable
growth factor, and NUL-terminated finalization. Built to sit underneath
text-producing code: compilers, serializers, formatters, renderers.

Quick Start:
    >>> from ovillo import Buffer
    >>> buf = Buffer(4, 2.0)
    >>> buf.push_string("hello")
    >>> buf.push(b"!")
    >>> buf.finalize_owned()
    b'hello!'

    >>> # Or build text with the str-oriented facade
    >>> from ovillo import StringBuilder
    >>> sb = StringBuilder()
    >>> sb.append("<p>").append("hi").append("</p>").build()
    '<p>hi</p>'

Allocation failures surface as AllocationError (a MemoryError subclass)
and leave the buffer usable, so callers choose the failure policy.
"""

from ovillo.allocator import Allocator, BudgetAllocator, BytearrayAllocator
from ovillo.buffer import Buffer
from ovillo.config import (
    BufferConfig,
    ResetPolicy,
    buffer_config_context,
    get_buffer_config,
    reset_buffer_config,
    set_buffer_config,
)
from ovillo.errors import AllocationError, BufferReleasedError, OvilloError, StaleViewError
from ovillo.profiling import GrowthAccumulator, get_growth_accumulator, profiled_buffers
from ovillo.stringbuilder import StringBuilder
from ovillo.view import BorrowedView

__version__ = "0.1.0"

__all__ = [
    "AllocationError",
    "Allocator",
    "BorrowedView",
    "Buffer",
    "BudgetAllocator",
    "BufferConfig",
    "BufferReleasedError",
    "BytearrayAllocator",
    "GrowthAccumulator",
    "OvilloError",
    "ResetPolicy",
    "StaleViewError",
    "StringBuilder",
    "__version__",
    "buffer_config_context",
    "get_buffer_config",
    "get_growth_accumulator",
    "profiled_buffers",
    "reset_buffer_config",
    "set_buffer_config",
]
