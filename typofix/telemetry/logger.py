"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic step-level runtime logs through `loguru`.
- Report match-local failures without leaking document text verbatim.
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


class RunLogger:
    """Emit deterministic step logs for CLI-observable correction activity."""

    def __init__(self, sink: TextIO | None = None) -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stdout
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level="INFO", colorize=False)

    def _emit(self, level: str, event: str, step: str, **context: object) -> None:
        """Emit one structured runtime log line."""

        line = f"[step] level={level} step={step} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_step_start(self, step: str) -> None:
        """Emit a step-start runtime event."""

        self._emit("INFO", "start", step)

    def log_step_complete(self, step: str, changes: int, matches: int) -> None:
        """Emit a step-complete runtime event with its change counters."""

        self._emit("INFO", "complete", step, changes=changes, matches=matches)

    def log_step_skipped(self, step: str) -> None:
        """Emit a step-skipped event for steps disabled by options."""

        self._emit("INFO", "skipped", step)

    def log_step_failure(self, step: str, error_type: str) -> None:
        """Emit a step-failure runtime event without sensitive payload details."""

        self._emit("ERROR", "failure", step, error_type=error_type)

    def log_item_failure(self, step: str, rule: str, error_type: str) -> None:
        """Emit a match-local failure event; the step keeps running."""

        self._emit("WARNING", "item_failure", step, rule=rule, error_type=error_type)
