"""Unit tests for strict per-type value coercion."""

from __future__ import annotations

import math
import struct

import pytest

from microconf.coercion import (
    coerce_bool,
    coerce_char,
    coerce_double,
    coerce_float,
    coerce_int,
    coerce_str,
    narrow_to_single,
)


@pytest.mark.parametrize(
    ("token", "expected"),
    [("true", True), ("1", True), ("false", False), ("0", False)],
)
def test_coerce_bool_accepts_exact_tokens(token: str, expected: bool) -> None:
    """Only the four canonical tokens are booleans."""

    assert coerce_bool(token) is expected


@pytest.mark.parametrize("token", ["True", "FALSE", "yes", "on", "2", "", " true"])
def test_coerce_bool_rejects_other_tokens(token: str) -> None:
    """Case variants and permissive words are rejected."""

    with pytest.raises(ValueError, match="is not a boolean value"):
        coerce_bool(token)


@pytest.mark.parametrize(("token", "expected"), [("42", 42), ("-7", -7), ("+3", 3), ("007", 7)])
def test_coerce_int_parses_base_ten(token: str, expected: int) -> None:
    """Signed decimal integers are accepted."""

    assert coerce_int(token) == expected


@pytest.mark.parametrize("token", ["abc", "42abc", "4 2", "", "1_000", "0x10", "1.0", "٣"])
def test_coerce_int_requires_the_whole_text(token: str) -> None:
    """Trailing garbage, empty text and non-ASCII digits are rejected."""

    with pytest.raises(ValueError, match="is not a base-10 integer"):
        coerce_int(token)


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("78.78", 78.78),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("-2.5E-1", -0.25),
        ("0x1.8p1", 3.0),
        ("-0X10", -16.0),
        ("inf", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_coerce_double_parses_literals(token: str, expected: float) -> None:
    """Decimal, exponent, hexadecimal and infinity forms are accepted."""

    assert coerce_double(token) == expected


def test_coerce_double_accepts_nan() -> None:
    """`nan` is a valid literal in any case."""

    assert math.isnan(coerce_double("NaN"))


@pytest.mark.parametrize("token", ["", "abc", "1.2.3", "1e", "1_0", "78.78f", ".", "0x"])
def test_coerce_double_rejects_partial_literals(token: str) -> None:
    """Any unconsumed text makes the value invalid."""

    with pytest.raises(ValueError, match="is not a floating-point literal"):
        coerce_double(token)


def test_coerce_float_narrows_to_single_precision() -> None:
    """Float values are rounded to the nearest single-precision number."""

    expected = struct.unpack("<f", struct.pack("<f", 420.1))[0]

    value = coerce_float("420.1")

    assert value == expected
    assert value != 420.1


def test_narrow_to_single_overflows_to_signed_infinity() -> None:
    """Values beyond the single-precision range saturate to infinity."""

    assert narrow_to_single(1e39) == math.inf
    assert narrow_to_single(-1e39) == -math.inf
    assert math.isnan(narrow_to_single(math.nan))


def test_coerce_float_rejects_trailing_garbage() -> None:
    """Float coercion shares the double literal grammar."""

    with pytest.raises(ValueError):
        coerce_float("1.5x")


def test_coerce_char_accepts_exactly_one_character() -> None:
    """A char value is exactly one character long."""

    assert coerce_char("f") == "f"
    assert coerce_char("é") == "é"
    for token in ("", "ab"):
        with pytest.raises(ValueError, match="exactly one character"):
            coerce_char(token)


def test_coerce_str_keeps_text_verbatim() -> None:
    """Strings are never rejected, including the empty string."""

    assert coerce_str("") == ""
    assert coerce_str("a = b : c") == "a = b : c"


@pytest.mark.parametrize(
    ("token", "expected"),
    [("0x1p5000", math.inf), ("+0X1.8P2000", math.inf), ("-0x1p5000", -math.inf)],
)
def test_overflowing_hex_literals_saturate_to_infinity(token: str, expected: float) -> None:
    """Hex literals beyond the double range become signed infinity for both float types."""

    assert coerce_double(token) == expected
    assert coerce_float(token) == expected
