"""ContextVar-based buffer configuration for Ovillo.

Provides context-local defaults using Python's ContextVars (PEP 567).
A Buffer reads the active config once, at construction; every option is
fixed for the lifetime of that Buffer.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # Explicit options always win
    buf = Buffer(64, 1.5)

    # Change the defaults for a block of code
    with buffer_config_context(BufferConfig(initial_capacity=4096)):
        buf = Buffer()  # 4096 bytes, growth factor 2.0

    # Or set them for the current context
    set_buffer_config(BufferConfig(growth_factor=1.5))
    try:
        buf = Buffer()
    finally:
        reset_buffer_config()

"""

from __future__ import annotations

import math
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class ResetPolicy(Enum):
    """What ``Buffer.reset()`` does with the allocation."""

    RETAIN_CAPACITY = "retain_capacity"
    """Set length to 0 and keep the grown allocation. O(1)."""

    REALLOCATE_TO_INITIAL = "reallocate_to_initial"
    """Replace the allocation with a fresh one of the initial capacity."""


@dataclass(frozen=True, slots=True)
class BufferConfig:
    """Immutable buffer configuration.

    Attributes:
        initial_capacity: Bytes allocated up front (terminator slot excluded)
        growth_factor: Capacity multiplier applied when the buffer is full
        reset_policy: Behaviour of Buffer.reset()
        min_capacity: Smallest capacity a growth may produce

    Raises:
        ValueError: If any option is out of range

    """

    initial_capacity: int = 16
    growth_factor: float = 2.0
    reset_policy: ResetPolicy = ResetPolicy.RETAIN_CAPACITY
    min_capacity: int = 8

    def __post_init__(self) -> None:
        validate_options(
            self.initial_capacity,
            self.growth_factor,
            self.reset_policy,
            self.min_capacity,
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> BufferConfig:
        """Create BufferConfig from dictionary.

        Useful where options come from external sources (YAML, TOML,
        framework settings). Unknown keys are silently ignored, and
        ``reset_policy`` may be given as its string value.

        Args:
            config_dict: Dictionary with config values. Keys should match
                BufferConfig attribute names.

        Returns:
            New BufferConfig instance with values from dict.

        Example:
            >>> config = BufferConfig.from_dict({
            ...     "growth_factor": 1.5,
            ...     "reset_policy": "reallocate_to_initial",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.reset_policy
            <ResetPolicy.REALLOCATE_TO_INITIAL: 'reallocate_to_initial'>

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "reset_policy" in filtered:
            filtered["reset_policy"] = ResetPolicy(filtered["reset_policy"])
        return cls(**filtered)


def validate_options(
    initial_capacity: int,
    growth_factor: float,
    reset_policy: ResetPolicy,
    min_capacity: int,
) -> None:
    """Check buffer options, raising ValueError or TypeError."""
    if isinstance(initial_capacity, bool) or not isinstance(initial_capacity, int):
        raise TypeError(f"initial_capacity must be an int, got {initial_capacity!r}")
    if initial_capacity < 0:
        raise ValueError(f"initial_capacity must be >= 0, got {initial_capacity}")
    if not (growth_factor > 1.0 and math.isfinite(growth_factor)):
        raise ValueError(f"growth_factor must be a finite number > 1.0, got {growth_factor!r}")
    if not isinstance(reset_policy, ResetPolicy):
        raise TypeError(f"reset_policy must be a ResetPolicy, got {reset_policy!r}")
    if isinstance(min_capacity, bool) or not isinstance(min_capacity, int):
        raise TypeError(f"min_capacity must be an int, got {min_capacity!r}")
    if min_capacity < 1:
        raise ValueError(f"min_capacity must be >= 1, got {min_capacity}")


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: BufferConfig = BufferConfig()

_buffer_config: ContextVar[BufferConfig] = ContextVar(
    "buffer_config",
    default=_DEFAULT_CONFIG,
)


def get_buffer_config() -> BufferConfig:
    """Get current buffer configuration (context-local)."""
    return _buffer_config.get()


def set_buffer_config(config: BufferConfig) -> None:
    """Set buffer configuration for current context.

    Only affects the current thread's context. Buffers that already
    exist keep the options they were created with.
    """
    _buffer_config.set(config)


def reset_buffer_config() -> None:
    """Reset to default configuration."""
    _buffer_config.set(_DEFAULT_CONFIG)


@contextmanager
def buffer_config_context(config: BufferConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: BufferConfig to use within the context.

    Example:
        >>> with buffer_config_context(BufferConfig(initial_capacity=0)):
        ...     Buffer().capacity
        0

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _buffer_config.get()
    _buffer_config.set(config)
    try:
        yield
    finally:
        _buffer_config.set(previous)


__all__ = [
    "BufferConfig",
    "ResetPolicy",
    "buffer_config_context",
    "get_buffer_config",
    "reset_buffer_config",
    "set_buffer_config",
    "validate_options",
]
