"""Command-line interface for microconf.

Responsibilities:
- Expose user-facing commands for parsing config files against a YAML schema.
- Convert CLI arguments into `ParserSettings` and run the parser.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_error_codes,
    echo_values,
    echo_values_json,
    exit_with_command_error,
)
from .config import BoundSchema, ParserSettings, SchemaLoader, SettingsLoader, SettingsSources
from .errors import CommandStageError, MicroConfError
from .parser import parse
from .telemetry.logger import RunLogger

app = typer.Typer(
    name="microconf",
    no_args_is_help=True,
    help="microconf CLI.",
)


def _load_schema(schema_path: Path) -> BoundSchema:
    """Load a YAML schema file and map failures to stage errors."""

    try:
        return SchemaLoader.from_yaml(schema_path)
    except FileNotFoundError as exc:
        raise CommandStageError(
            stage="schema",
            detail=f"Schema file not found: `{schema_path}`.",
            hint="Provide an existing path via `--schema <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise CommandStageError(
            stage="schema",
            detail=f"Invalid schema file `{schema_path}`: {exc}",
            hint="Fix schema entries (`key`, `type`, `default`) and rerun.",
        ) from exc
    except Exception as exc:
        raise CommandStageError(
            stage="schema",
            detail=f"Failed to load schema file `{schema_path}`: {exc}",
            hint="Verify YAML syntax and file permissions.",
        ) from exc


def _resolve_settings(mode: str | None) -> ParserSettings:
    """Resolve parser settings from CLI options and environment variables."""

    cli_values: dict[str, str] = {}
    if mode is not None:
        cli_values["match_mode"] = mode
    try:
        return SettingsLoader.resolve(SettingsSources(cli=cli_values, env=os.environ))
    except ValueError as exc:
        raise CommandStageError(
            stage="settings",
            detail=str(exc),
            hint="Use `--mode prefix` or `--mode exact-token`.",
        ) from exc


@app.command("parse")
def parse_command(
    config_file: Annotated[Path, typer.Argument(help="Path to the config file to parse.")],
    schema: Annotated[
        Path,
        typer.Option("--schema", "-s", help="YAML schema describing expected keys."),
    ],
    mode: Annotated[
        str | None,
        typer.Option(
            "--mode",
            help="Key matching mode: `prefix` (default) or `exact-token`.",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print parsed values as one JSON object."),
    ] = False,
) -> None:
    """Parse a config file and print the resolved value of every schema key."""

    run_logger = RunLogger()
    stage = "settings"
    try:
        run_logger.log_stage_start(stage)
        settings = _resolve_settings(mode)
        run_logger.log_stage_complete(stage, match_mode=settings.match_mode.value)

        stage = "schema"
        run_logger.log_stage_start(stage, path=schema)
        bound = _load_schema(schema)
        run_logger.log_stage_complete(stage, entries=len(bound.entries))

        stage = "parse"
        run_logger.log_stage_start(stage, path=config_file)
        result = parse(
            bound.entries,
            config_file,
            mode=settings.match_mode,
            encoding=settings.encoding,
        )
        run_logger.log_stage_complete(stage, assignments=len(result.assignments))
    except MicroConfError as exc:
        run_logger.log_stage_failure(stage, exc.code.name)
        exit_with_command_error("parse", exc)
    except Exception as exc:
        run_logger.log_stage_failure(stage, type(exc).__name__)
        exit_with_command_error("parse", exc)

    if as_json:
        echo_values_json(bound.entries, bound.values)
    else:
        echo_values(bound.entries, bound.values)


@app.command("codes")
def codes_command() -> None:
    """List parse error codes."""

    echo_error_codes()


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
