"""Structured event logging utilities.

Responsibilities:
- Emit concise, deterministic component-level events through `loguru`.
- Keep session tokens and response bodies out of log lines.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def configure_logging(sink: TextIO | None = None, level: str = "INFO") -> None:
    """Route all `loguru` output to one plain-message sink.

    The CLI calls this with stderr so stdout carries only puzzle data.
    """

    _loguru_logger.remove()
    _loguru_logger.add(sink or sys.stderr, format="{message}", level=level, colorize=False)


class EventLogger:
    """Emit deterministic events for one library component."""

    def __init__(self, component: str) -> None:
        self.component = component

    def _emit(self, level: str, event: str, **context: object) -> None:
        """Emit one structured event line."""

        line = (
            f"[aocinput] level={level} component={self.component} "
            f"event={event}{_format_context(context)}"
        )
        _loguru_logger.log(level, line)

    def debug(self, event: str, **context: object) -> None:
        self._emit("DEBUG", event, **context)

    def info(self, event: str, **context: object) -> None:
        self._emit("INFO", event, **context)

    def warning(self, event: str, **context: object) -> None:
        self._emit("WARNING", event, **context)

    def error(self, event: str, **context: object) -> None:
        self._emit("ERROR", event, **context)
