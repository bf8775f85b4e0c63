"""Domain exceptions and signed error codes for parse calls and CLI diagnostics."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Signed result codes of a parse call.

    Values at or below `ERROR_CODE_MIN` are reserved for future extension.
    """

    OK = 0
    CONF_NULL = -1
    OPENING_FILE_ERROR = -2
    CLOSING_FILE_ERROR = -3
    UNKNOWN_TYPE = -4
    INVALID_BOOL = -5
    INVALID_INT = -6
    INVALID_DOUBLE = -7
    INVALID_FLOAT = -8
    INVALID_CHAR = -9


ERROR_CODE_MIN = -10


class CommandStageError(RuntimeError):
    """Raised when a CLI stage outside the parse core fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class MicroConfError(RuntimeError):
    """Raised when a parse call stops on its first error."""

    def __init__(
        self,
        *,
        code: ErrorCode,
        detail: str,
        key: str | None = None,
        line_number: int | None = None,
        value: str | None = None,
    ) -> None:
        """Initialize an error carrying its code and the failing location."""

        super().__init__(detail)
        self.code = code
        self.detail = detail
        self.key = key
        self.line_number = line_number
        self.value = value

    def location(self) -> str:
        """Return a compact `key=... line=...` label, or empty when unknown."""

        parts: list[str] = []
        if self.key is not None:
            parts.append(f"key={self.key}")
        if self.line_number is not None:
            parts.append(f"line={self.line_number}")
        return " ".join(parts)
