"""Benchmark fixtures and configuration."""

from __future__ import annotations

import pytest


@pytest.fixture
def fragments() -> list[bytes]:
    """Twenty thousand small HTML-ish fragments (~600KB total)."""
    return [f"<span class=\"t{i % 7}\">{i}</span>".encode() for i in range(20_000)]


@pytest.fixture
def large_text() -> str:
    """A single ~100KB text block for one-shot appends."""
    sections = []
    for i in range(100):
        sections.append(f"Section {i}\n" + "lorem ipsum dolor sit amet " * 36 + "\n")
    return "".join(sections)
