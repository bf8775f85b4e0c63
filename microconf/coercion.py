"""Strict value coercion from configuration text to typed values.

Every coercer consumes the whole value text or raises `ValueError`; no
surrounding whitespace, case folding or partial parse is accepted.
"""

from __future__ import annotations

import math
import re
import struct
from typing import Any, Callable

from .errors import ErrorCode
from .schema import ConfType


_TRUE_BOOLEAN_TOKENS = frozenset({"true", "1"})
_FALSE_BOOLEAN_TOKENS = frozenset({"false", "0"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
)
_HEX_FLOAT_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?"
)
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf(?:inity)?|nan)", re.IGNORECASE)


def coerce_bool(text: str) -> bool:
    """Accept exactly `true`/`1` or `false`/`0`."""

    if text in _TRUE_BOOLEAN_TOKENS:
        return True
    if text in _FALSE_BOOLEAN_TOKENS:
        return False
    raise ValueError(f"`{text}` is not a boolean value (`true`/`false`, `1`/`0`).")


def coerce_char(text: str) -> str:
    """Accept exactly one character."""

    if len(text) != 1:
        raise ValueError(f"`{text}` must be exactly one character, got {len(text)}.")
    return text


def coerce_str(text: str) -> str:
    """Return the value text verbatim; empty text is a valid value."""

    return text


def coerce_int(text: str) -> int:
    """Parse a base-10 integer with an optional sign."""

    if _INT_RE.fullmatch(text) is None:
        raise ValueError(f"`{text}` is not a base-10 integer.")
    return int(text)


def coerce_double(text: str) -> float:
    """Parse a floating-point literal in double precision.

    Decimal, exponent, hexadecimal (`0x1.8p1`), `inf`, `infinity` and `nan`
    forms are accepted.
    """

    if _DECIMAL_FLOAT_RE.fullmatch(text) or _SPECIAL_FLOAT_RE.fullmatch(text):
        return float(text)
    if _HEX_FLOAT_RE.fullmatch(text):
        try:
            return float.fromhex(text)
        except OverflowError:
            return -math.inf if text.startswith("-") else math.inf
    raise ValueError(f"`{text}` is not a floating-point literal.")


def coerce_float(text: str) -> float:
    """Parse a floating-point literal and narrow it to single precision."""

    return narrow_to_single(coerce_double(text))


def narrow_to_single(value: float) -> float:
    """Round a double to the nearest IEEE-754 single-precision value.

    Values beyond the single-precision range become signed infinity.
    """

    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


COERCERS: dict[ConfType, tuple[Callable[[str], Any], ErrorCode]] = {
    ConfType.BOOL: (coerce_bool, ErrorCode.INVALID_BOOL),
    ConfType.INT: (coerce_int, ErrorCode.INVALID_INT),
    ConfType.FLOAT: (coerce_float, ErrorCode.INVALID_FLOAT),
    ConfType.DOUBLE: (coerce_double, ErrorCode.INVALID_DOUBLE),
    ConfType.CHAR: (coerce_char, ErrorCode.INVALID_CHAR),
    ConfType.STR: (coerce_str, ErrorCode.OK),
}
