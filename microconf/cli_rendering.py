"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
parsed value listings and the error-code table.
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping, NoReturn, Sequence

import typer

from .errors import CommandStageError, ErrorCode, MicroConfError
from .schema import ConfEntry


UNSET_LABEL = "(unset)"


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit.

    Parse errors exit with the magnitude of their error code; everything
    else exits with code 1.
    """

    if isinstance(exc, MicroConfError):
        typer.secho(
            f"{command_name} failed with {exc.code.name} ({int(exc.code)}): {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        location = exc.location()
        if location:
            typer.secho(f"Location: {location}", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=-int(exc.code)) from exc

    if isinstance(exc, CommandStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def format_value(value: Any) -> str:
    """Render one parsed value the way it would be written in a config file."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def echo_values(entries: Sequence[ConfEntry], values: Mapping[str, Any]) -> None:
    """Print `key = value` rows in schema order."""

    for entry in entries:
        if entry.key in values:
            typer.echo(f"{entry.key} = {format_value(values[entry.key])}")
        else:
            typer.echo(f"{entry.key} = {UNSET_LABEL}")


def echo_values_json(entries: Sequence[ConfEntry], values: Mapping[str, Any]) -> None:
    """Print values as one JSON object in schema order; unset keys map to `null`.

    `nan`, `inf` and `-inf` are written as strings.
    """

    payload = {entry.key: _json_value(values.get(entry.key)) for entry in entries}
    typer.echo(json.dumps(payload, ensure_ascii=False, allow_nan=False))


def _json_value(value: Any) -> Any:
    """Map non-finite floats to their config spelling; JSON has no NaN or infinity."""

    if isinstance(value, float) and not math.isfinite(value):
        return format_value(value)
    return value


def echo_error_codes() -> None:
    """Print the error-code table."""

    for code in ErrorCode:
        typer.echo(f"{int(code):>3}  {code.name}")
