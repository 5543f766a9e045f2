"""Tests for ovillo.config — BufferConfig and ContextVar-scoped defaults."""

import threading

import pytest

from ovillo import Buffer, StringBuilder
from ovillo.config import (
    BufferConfig,
    ResetPolicy,
    buffer_config_context,
    get_buffer_config,
    reset_buffer_config,
    set_buffer_config,
)


class TestBufferConfig:
    def test_defaults(self) -> None:
        config = BufferConfig()
        assert config.initial_capacity == 16
        assert config.growth_factor == 2.0
        assert config.reset_policy is ResetPolicy.RETAIN_CAPACITY
        assert config.min_capacity == 8

    def test_frozen(self) -> None:
        config = BufferConfig()
        with pytest.raises(AttributeError):
            config.growth_factor = 3.0  # type: ignore[misc]

    def test_validates(self) -> None:
        with pytest.raises(ValueError):
            BufferConfig(growth_factor=1.0)
        with pytest.raises(ValueError):
            BufferConfig(initial_capacity=-5)
        with pytest.raises(ValueError):
            BufferConfig(min_capacity=0)
        with pytest.raises(TypeError):
            BufferConfig(reset_policy="retain_capacity")  # type: ignore[arg-type]


class TestFromDict:
    def test_basic(self) -> None:
        config = BufferConfig.from_dict({"initial_capacity": 64, "growth_factor": 1.5})
        assert config.initial_capacity == 64
        assert config.growth_factor == 1.5
        assert config.min_capacity == 8

    def test_ignores_unknown_keys(self) -> None:
        config = BufferConfig.from_dict({"growth_factor": 3.0, "unknown_key": "ignored"})
        assert config.growth_factor == 3.0

    def test_empty(self) -> None:
        assert BufferConfig.from_dict({}) == BufferConfig()

    def test_reset_policy_string(self) -> None:
        config = BufferConfig.from_dict({"reset_policy": "reallocate_to_initial"})
        assert config.reset_policy is ResetPolicy.REALLOCATE_TO_INITIAL

    def test_reset_policy_enum(self) -> None:
        config = BufferConfig.from_dict({"reset_policy": ResetPolicy.RETAIN_CAPACITY})
        assert config.reset_policy is ResetPolicy.RETAIN_CAPACITY

    def test_invalid_reset_policy(self) -> None:
        with pytest.raises(ValueError):
            BufferConfig.from_dict({"reset_policy": "shrink"})


class TestContextDefaults:
    def test_default_config(self) -> None:
        assert get_buffer_config() == BufferConfig()

    def test_buffer_uses_active_config(self) -> None:
        config = BufferConfig(initial_capacity=3, growth_factor=1.5, min_capacity=2)
        with buffer_config_context(config):
            buf = Buffer()
        assert buf.capacity == 3
        assert buf.growth_factor == 1.5
        assert buf.min_capacity == 2

    def test_explicit_arguments_win(self) -> None:
        with buffer_config_context(BufferConfig(initial_capacity=3)):
            buf = Buffer(10, 4.0)
        assert buf.capacity == 10
        assert buf.growth_factor == 4.0

    def test_string_builder_uses_active_config(self) -> None:
        with buffer_config_context(BufferConfig(initial_capacity=0)):
            sb = StringBuilder()
        assert sb.buffer.capacity == 0

    def test_context_restores_previous(self) -> None:
        outer = BufferConfig(initial_capacity=1)
        inner = BufferConfig(initial_capacity=2)
        with buffer_config_context(outer):
            with buffer_config_context(inner):
                assert get_buffer_config() is inner
            assert get_buffer_config() is outer
        assert get_buffer_config() == BufferConfig()

    def test_context_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with buffer_config_context(BufferConfig(initial_capacity=1)):
                raise RuntimeError("boom")
        assert get_buffer_config() == BufferConfig()

    def test_set_and_reset(self) -> None:
        set_buffer_config(BufferConfig(growth_factor=1.25))
        try:
            assert Buffer().growth_factor == 1.25
        finally:
            reset_buffer_config()
        assert Buffer().growth_factor == 2.0

    def test_existing_buffer_keeps_options(self) -> None:
        buf = Buffer()
        with buffer_config_context(BufferConfig(growth_factor=3.0)):
            assert buf.growth_factor == 2.0

    def test_thread_changes_do_not_leak(self) -> None:
        seen: list[float] = []
        errors: list[str] = []

        def worker() -> None:
            try:
                set_buffer_config(BufferConfig(growth_factor=5.0))
                seen.append(Buffer().growth_factor)
            except Exception as e:
                errors.append(str(e))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert seen == [5.0] * 4
        assert get_buffer_config() == BufferConfig()
