"""Tests for Ovillo utility modules."""

import pytest


class TestTerminatedLength:
    def test_stops_at_nul(self) -> None:
        from ovillo.utils.text import terminated_length

        assert terminated_length(b"abc\x00def") == 3

    def test_no_terminator_counts_all(self) -> None:
        from ovillo.utils.text import terminated_length

        assert terminated_length(b"abc") == 3
        assert terminated_length(b"") == 0

    def test_leading_terminator(self) -> None:
        from ovillo.utils.text import terminated_length

        assert terminated_length(b"\x00abc") == 0

    def test_bytearray_and_memoryview(self) -> None:
        from ovillo.utils.text import terminated_length

        assert terminated_length(bytearray(b"ab\x00")) == 2
        assert terminated_length(memoryview(b"a\x00b")) == 1

    def test_custom_terminator(self) -> None:
        from ovillo.utils.text import terminated_length

        assert terminated_length(b"line\nnext", ord("\n")) == 4


class TestAsBytes:
    def test_encodes_str(self) -> None:
        from ovillo.utils.text import as_bytes

        assert as_bytes("é") == b"\xc3\xa9"
        assert as_bytes("é", "latin-1") == b"\xe9"

    def test_passes_bytes_through(self) -> None:
        from ovillo.utils.text import as_bytes

        data = bytearray(b"x")
        assert as_bytes(data) is data

    def test_rejects_other_types(self) -> None:
        from ovillo.utils.text import as_bytes

        with pytest.raises(TypeError, match="int"):
            as_bytes(5)  # type: ignore[arg-type]


class TestGetLogger:
    def test_adds_prefix(self) -> None:
        from ovillo.utils.logger import get_logger

        assert get_logger("mymodule").name == "ovillo.mymodule"

    def test_keeps_existing_prefix(self) -> None:
        from ovillo.utils.logger import get_logger

        assert get_logger("ovillo.buffer").name == "ovillo.buffer"
        assert get_logger("ovillo").name == "ovillo"

    def test_similar_name_still_prefixed(self) -> None:
        from ovillo.utils.logger import get_logger

        assert get_logger("ovillos").name == "ovillo.ovillos"
