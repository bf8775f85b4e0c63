"""Line scanning helpers: comment stripping and separator extents.

Responsibilities:
- Truncate a raw line at its first `#` comment marker.
- Count leading separator characters, optionally tracking line/column.
- Trim trailing value padding.

Separators are exactly space, tab and newline. Carriage returns and other
Unicode whitespace are ordinary content.
"""

from __future__ import annotations

from dataclasses import dataclass


SEPARATORS = frozenset({" ", "\t", "\n"})
COMMENT_MARKER = "#"
_TRAILING_PADDING = " \n"


@dataclass(slots=True)
class ScanPosition:
    """Mutable line/column counters updated while skipping separators.

    Attributes:
        line: Number of newlines skipped so far.
        column: Column offset since the last newline.
    """

    line: int = 0
    column: int = 0


def left_space(
    text: str,
    limit: int | None = None,
    position: ScanPosition | None = None,
) -> int:
    """Count separator characters from the left of `text`.

    Args:
        text: Input text.
        limit: Maximum number of characters to inspect. Defaults to the text length.
        position: Optional counters advanced for every skipped separator.

    Returns:
        Number of leading separators, at most `limit`.
    """

    if not text or limit == 0:
        return 0

    bound = len(text) if limit is None else min(limit, len(text))
    pos = 0
    while pos < bound and text[pos] in SEPARATORS:
        if position is not None:
            if text[pos] == "\n":
                position.line += 1
                position.column = 0
            else:
                position.column += 1
        pos += 1
    return pos


def strip_comment(line: str) -> str:
    """Drop the first `#` and everything after it."""

    marker = line.find(COMMENT_MARKER)
    if marker < 0:
        return line
    return line[:marker]


def is_skippable(trimmed: str) -> bool:
    """Return whether a left-trimmed line carries no declaration."""

    return not trimmed or trimmed.startswith("\n")


def right_trim(text: str) -> str:
    """Drop trailing spaces and newlines; tabs are kept."""

    return text.rstrip(_TRAILING_PADDING)
