"""Unit tests for deterministic structured event lines."""

from __future__ import annotations

import io
from typing import Iterator

from loguru import logger
import pytest

from aocinput.telemetry.logger import EventLogger, configure_logging


@pytest.fixture
def captured_lines() -> Iterator[list[str]]:
    """Collect formatted loguru messages for the duration of one test."""

    lines: list[str] = []
    handler_id = logger.add(lambda message: lines.append(str(message).rstrip("\n")), format="{message}")
    yield lines
    logger.remove(handler_id)


def test_event_lines_are_sorted_and_sanitized(captured_lines: list[str]) -> None:
    """Context keys should be sorted and values reduced to shell-safe tokens."""

    EventLogger("client").info("fetch_start", key="2023/1", waited_seconds="0.000", note="a b;c")

    assert captured_lines == [
        "[aocinput] level=INFO component=client event=fetch_start "
        "key=2023/1 note=a_b_c waited_seconds=0.000"
    ]


def test_blank_context_values_render_as_none(captured_lines: list[str]) -> None:
    """Empty values should still produce a parseable token."""

    EventLogger("store").warning("throttle_corrupt", detail="  ")

    assert captured_lines == ["[aocinput] level=WARNING component=store event=throttle_corrupt detail=none"]


def test_configure_logging_filters_by_level() -> None:
    """The configured sink should only receive events at or above its level."""

    sink = io.StringIO()
    configure_logging(sink, level="WARNING")
    try:
        events = EventLogger("throttle")
        events.info("wait", seconds="180.000")
        events.warning("future_timestamp", ahead_seconds="5.000")
    finally:
        configure_logging()

    assert sink.getvalue().splitlines() == [
        "[aocinput] level=WARNING component=throttle event=future_timestamp ahead_seconds=5.000"
    ]
