"""Utility modules for Ovillo.

Provides:
- text: terminated_length, as_bytes for terminated byte strings
- logger: get_logger for logging
"""

from ovillo.utils.logger import get_logger
from ovillo.utils.text import TERMINATOR, as_bytes, terminated_length

__all__ = [
    "TERMINATOR",
    "as_bytes",
    "get_logger",
    "terminated_length",
]
