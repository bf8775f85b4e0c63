"""Entry matching and the line-by-line parse loop.

Responsibilities:
- Open a configuration source as a scoped resource.
- Match each meaningful line against the ordered schema (first match wins).
- Extract the value text, coerce it and write it through the entry's slot.

Key public functions:
- `parse`: parse a path or stream, raising `MicroConfError` on the first error.
- `parse_status`: numeric call contract returning an `ErrorCode`.
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from enum import Enum
import os
from typing import Any, Iterable, Iterator, Sequence, TextIO, Union

from .coercion import COERCERS
from .errors import ErrorCode, MicroConfError
from .scanner import SEPARATORS, is_skippable, left_space, right_trim, strip_comment
from .schema import SLOT_TYPES, ConfEntry, ConfType


VALUE_SEPARATORS = ("=", ":")

Source = Union[str, os.PathLike, TextIO]


class MatchMode(str, Enum):
    """How an entry key is compared against the start of a line.

    `PREFIX` accepts any literal prefix, so key `x` also matches `xyz = 1`.
    `EXACT_TOKEN` additionally requires the key to end at a separator,
    `=`, `:` or the end of the line.
    """

    PREFIX = "prefix"
    EXACT_TOKEN = "exact-token"


@dataclass(frozen=True, slots=True)
class Assignment:
    """One value written into a slot.

    Attributes:
        key: Key of the matched entry.
        type: Declared type of the matched entry.
        line_number: 1-based line the value came from.
        value: Coerced value handed to the slot; strings are owned by the caller.
    """

    key: str
    type: ConfType
    line_number: int
    value: Any


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of a successful parse.

    Attributes:
        source: Path or stream name that was parsed.
        assignments: Applied writes in document order.
    """

    source: str
    assignments: tuple[Assignment, ...] = ()

    def values(self) -> dict[str, Any]:
        """Return the last value written for each matched key."""

        return {assignment.key: assignment.value for assignment in self.assignments}


def match_key(key: str, content: str, mode: MatchMode = MatchMode.PREFIX) -> bool:
    """Return whether `key` starts the left-trimmed line `content`."""

    if not content.startswith(key):
        return False
    if mode is MatchMode.PREFIX:
        return True
    follower = content[len(key) : len(key) + 1]
    return not follower or follower in SEPARATORS or follower in VALUE_SEPARATORS


def extract_value(content: str, key: str) -> str:
    """Return the value text following `key`, one optional `=`/`:` and padding."""

    rest = content[len(key) :]
    rest = rest[left_space(rest) :]
    if rest[:1] in VALUE_SEPARATORS:
        rest = rest[1:]
    rest = rest[left_space(rest) :]
    return right_trim(rest)


def parse(
    entries: Sequence[ConfEntry] | None,
    source: Source,
    *,
    mode: MatchMode = MatchMode.PREFIX,
    count: int | None = None,
    encoding: str = "utf-8",
) -> ParseResult:
    """Parse a configuration source into the slots of `entries`.

    Args:
        entries: Ordered schema entries. Earlier entries win on overlapping keys.
        source: Filesystem path, opened and closed here, or an open text stream
            that stays owned by the caller.
        mode: Key matching mode.
        count: Optional number of leading entries to use.
        encoding: Text encoding for path sources.

    Returns:
        Applied assignments in document order.

    Raises:
        MicroConfError: On the first precondition, resource or content error.
            Writes applied before the failing line are kept.
    """

    selected = _select_entries(entries, count)

    if not isinstance(source, (str, os.PathLike)):
        label = str(getattr(source, "name", "<stream>"))
        return ParseResult(source=label, assignments=_parse_lines(selected, source, mode, label))

    label = os.fspath(source)
    handle = _open_source(label, encoding)
    try:
        assignments = _parse_lines(selected, handle, mode, label)
    except BaseException:
        with contextlib.suppress(OSError):
            handle.close()
        raise
    _close_source(handle, label)
    return ParseResult(source=label, assignments=assignments)


def parse_status(
    entries: Sequence[ConfEntry] | None,
    path: str | os.PathLike[str],
    count: int | None = None,
    *,
    mode: MatchMode = MatchMode.PREFIX,
) -> ErrorCode:
    """Parse `path` and report the outcome as an `ErrorCode` instead of raising."""

    try:
        parse(entries, path, mode=mode, count=count)
    except MicroConfError as exc:
        return exc.code
    return ErrorCode.OK


def _select_entries(
    entries: Sequence[ConfEntry] | None, count: int | None
) -> Sequence[ConfEntry]:
    """Validate the schema precondition and apply the optional entry count."""

    if entries is None:
        raise MicroConfError(code=ErrorCode.CONF_NULL, detail="Schema entries are missing.")
    if count is not None:
        if count < 0 or count > len(entries):
            raise ValueError(
                f"`count` must be between 0 and {len(entries)}, got {count}."
            )
        entries = entries[:count]
    if not entries:
        raise MicroConfError(code=ErrorCode.CONF_NULL, detail="Schema has no entries.")
    return entries


def _open_source(path: str, encoding: str) -> TextIO:
    """Open a path for reading with newline translation disabled."""

    try:
        return open(path, "r", encoding=encoding, newline="\n")
    except OSError as exc:
        raise MicroConfError(
            code=ErrorCode.OPENING_FILE_ERROR,
            detail=f"Failed to open config file `{path}`: {exc}",
        ) from exc


def _close_source(handle: TextIO, label: str) -> None:
    """Close an owned handle after a successful parse."""

    try:
        handle.close()
    except OSError as exc:
        raise MicroConfError(
            code=ErrorCode.CLOSING_FILE_ERROR,
            detail=f"Failed to close config file `{label}`: {exc}",
        ) from exc


def _read_lines(handle: Iterable[str], label: str) -> Iterator[str]:
    """Yield raw lines, mapping read failures to a resource error."""

    try:
        for line in handle:
            yield line
    except (OSError, UnicodeDecodeError) as exc:
        raise MicroConfError(
            code=ErrorCode.OPENING_FILE_ERROR,
            detail=f"Failed to read config file `{label}`: {exc}",
        ) from exc


def _parse_lines(
    entries: Sequence[ConfEntry],
    handle: Iterable[str],
    mode: MatchMode,
    label: str,
) -> tuple[Assignment, ...]:
    assignments: list[Assignment] = []
    for line_number, raw_line in enumerate(_read_lines(handle, label), start=1):
        line = strip_comment(raw_line)
        content = line[left_space(line) :]
        if is_skippable(content):
            continue

        for entry in entries:
            if not match_key(entry.key, content, mode):
                continue
            value_text = extract_value(content, entry.key)
            value = _apply(entry, value_text, line_number)
            assignments.append(
                Assignment(
                    key=entry.key,
                    type=entry.type,
                    line_number=line_number,
                    value=value,
                )
            )
            break

    return tuple(assignments)


def _apply(entry: ConfEntry, text: str, line_number: int) -> Any:
    """Coerce `text` for `entry` and write it through the entry's slot."""

    conf_type = entry.type
    if conf_type is None or type(entry.target) is not SLOT_TYPES.get(conf_type):
        raise MicroConfError(
            code=ErrorCode.UNKNOWN_TYPE,
            detail=(
                f"Entry `{entry.key}` has an unsupported target "
                f"`{type(entry.target).__name__}` (line {line_number})."
            ),
            key=entry.key,
            line_number=line_number,
            value=text,
        )

    coerce, error_code = COERCERS[conf_type]
    try:
        value = coerce(text)
    except ValueError as exc:
        raise MicroConfError(
            code=error_code,
            detail=f"Invalid {conf_type.value} for `{entry.key}` on line {line_number}: {exc}",
            key=entry.key,
            line_number=line_number,
            value=text,
        ) from exc

    entry.target.setter(value)
    return value
