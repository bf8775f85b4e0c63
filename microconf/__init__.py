"""Top-level package for microconf.

This package parses flat `key = value` configuration files against an
ordered schema of typed entries. The main entry point is `parse`.
"""

from .errors import ERROR_CODE_MIN, ErrorCode, MicroConfError
from .parser import Assignment, MatchMode, ParseResult, parse, parse_status
from .schema import (
    BoolSlot,
    CharSlot,
    ConfEntry,
    ConfType,
    DoubleSlot,
    FloatSlot,
    IntSlot,
    StrSlot,
    attribute_setter,
    item_setter,
)

__all__ = [
    "Assignment",
    "BoolSlot",
    "CharSlot",
    "ConfEntry",
    "ConfType",
    "DoubleSlot",
    "ERROR_CODE_MIN",
    "ErrorCode",
    "FloatSlot",
    "IntSlot",
    "MatchMode",
    "MicroConfError",
    "ParseResult",
    "StrSlot",
    "attribute_setter",
    "item_setter",
    "parse",
    "parse_status",
    "__version__",
]

__version__ = "0.1.0"
