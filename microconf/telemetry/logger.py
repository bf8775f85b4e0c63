"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic stage-level logs for CLI parse runs.
- Route every line through `loguru` into a caller-chosen sink.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from loguru import logger as _loguru_logger


_UNSAFE_CONTEXT_RE = re.compile(r"[^\w.:/-]")


def _context_token(value: object) -> str:
    """Render a path, count or code name as one whitespace-free token."""

    raw = str(value).strip()
    return _UNSAFE_CONTEXT_RE.sub("_", raw) if raw else "none"


def _format_context(context: dict[str, object]) -> str:
    return "".join(f" {key}={_context_token(context[key])}" for key in sorted(context))


class RunLogger:
    """Emit deterministic stage logs for CLI-observable parse activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Bind loguru to a sink with plain message formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        line = f"[phase] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def log_stage_start(self, stage: str, **context: object) -> None:
        """Emit a stage-start event."""

        self._emit("INFO", "start", stage, **context)

    def log_stage_complete(self, stage: str, **context: object) -> None:
        """Emit a stage-complete event."""

        self._emit("INFO", "complete", stage, **context)

    def log_stage_failure(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a stage-failure event without value payloads."""

        self._emit("ERROR", "failure", stage, error_type=error_type, **context)
