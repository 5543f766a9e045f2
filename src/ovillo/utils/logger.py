"""Minimal logging utilities for Ovillo.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from ovillo.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Buffer grew")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "ovillo." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'ovillo.mymodule'
    """
    if not (name == "ovillo" or name.startswith("ovillo.")):
        name = f"ovillo.{name}"
    return logging.getLogger(name)
