"""Parser settings and YAML schema loading for microconf.

Responsibilities:
- Define runtime parser settings as a typed dataclass.
- Resolve settings with deterministic precedence (`cli` > `env` > defaults).
- Build schema entries bound to a plain dict store from YAML documents.

Key types:
- `ParserSettings`: normalized match mode and encoding for one parse run.
- `SettingsSources`: optional value sources for precedence resolution.
- `SettingsLoader`: settings resolution entry point.
- `BoundSchema`: ordered entries plus the dict their slots write into.
- `SchemaLoader`: static construction helpers for `BoundSchema`.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .coercion import COERCERS, narrow_to_single
from .parser import MatchMode
from .schema import ConfEntry, ConfType, item_setter, parse_conf_type


_DEFAULT_ENCODING = "utf-8"
_MATCH_MODE_ENV_KEY = "MICROCONF_MATCH_MODE"
_ENCODING_ENV_KEY = "MICROCONF_ENCODING"


def _normalize_optional_string(value: object) -> str | None:
    """Return a stripped non-empty string, or `None` for missing/blank values."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_match_mode(value: MatchMode | str) -> MatchMode:
    """Resolve a `MatchMode` from a member or its textual value.

    Underscores are accepted in place of dashes (`exact_token`).
    """

    if isinstance(value, MatchMode):
        return value
    token = str(value).strip().lower().replace("_", "-")
    try:
        return MatchMode(token)
    except ValueError:
        supported = ", ".join(mode.value for mode in MatchMode)
        raise ValueError(
            f"Unsupported match mode `{value}`; supported: {supported}."
        ) from None


@dataclass(frozen=True, slots=True)
class SettingsSources:
    """Source mappings used for deterministic settings precedence.

    Attributes:
        cli: Values explicitly provided by CLI options (`match_mode`, `encoding`).
        env: Environment variables (`MICROCONF_MATCH_MODE`, `MICROCONF_ENCODING`).
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParserSettings:
    """Runtime settings for one parse run.

    Attributes:
        match_mode: Key matching mode.
        encoding: Text encoding used to open config files.
    """

    match_mode: MatchMode = MatchMode.PREFIX
    encoding: str = _DEFAULT_ENCODING

    def validate(self) -> None:
        """Validate settings values before a parse run."""

        if not isinstance(self.match_mode, MatchMode):
            raise ValueError("`match_mode` must be a MatchMode value.")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown `encoding` value `{self.encoding}`.") from None


class SettingsLoader:
    """Factory methods for creating `ParserSettings` from external sources."""

    @staticmethod
    def resolve(sources: SettingsSources | None = None) -> ParserSettings:
        """Resolve settings with precedence `cli` > `env` > defaults."""

        resolved_sources = sources if sources is not None else SettingsSources()

        match_mode_value = SettingsLoader._lookup(
            resolved_sources, "match_mode", _MATCH_MODE_ENV_KEY
        )
        encoding = (
            SettingsLoader._lookup(resolved_sources, "encoding", _ENCODING_ENV_KEY)
            or _DEFAULT_ENCODING
        )
        match_mode = (
            parse_match_mode(match_mode_value)
            if match_mode_value is not None
            else MatchMode.PREFIX
        )

        settings = ParserSettings(match_mode=match_mode, encoding=encoding)
        settings.validate()
        return settings

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ParserSettings:
        """Resolve settings from environment variables only."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        return SettingsLoader.resolve(SettingsSources(env=env_map))

    @staticmethod
    def _lookup(sources: SettingsSources, key: str, env_key: str) -> str | None:
        cli_value = _normalize_optional_string(sources.cli.get(key))
        if cli_value is not None:
            return cli_value
        return _normalize_optional_string(sources.env.get(env_key))


@dataclass(slots=True)
class BoundSchema:
    """Schema entries whose slots write into `values`.

    Attributes:
        entries: Ordered schema entries.
        values: Current value per key, pre-populated with declared defaults.
        types: Declared type per key.
    """

    entries: tuple[ConfEntry, ...]
    values: dict[str, Any]
    types: dict[str, ConfType]


class SchemaLoader:
    """Factory methods for creating `BoundSchema` from YAML documents."""

    _SUPPORTED_ENTRY_KEYS = frozenset({"key", "type", "default"})
    _REQUIRED_ENTRY_KEYS = frozenset({"key", "type"})

    @staticmethod
    def from_yaml(path: Path) -> BoundSchema:
        """Create a bound schema from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML schema `{path}` must contain a top-level mapping/object.")
        return SchemaLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> BoundSchema:
        """Create a bound schema from a `{"entries": [...]}` mapping."""

        unknown = sorted(str(key) for key in set(payload).difference({"entries"}))
        if unknown:
            raise ValueError(
                f"{source_label} includes unsupported key(s): {', '.join(unknown)}."
            )
        raw_entries = payload.get("entries")
        if not isinstance(raw_entries, list) or not raw_entries:
            raise ValueError(f"{source_label} requires a non-empty `entries` list.")

        values: dict[str, Any] = {}
        types: dict[str, ConfType] = {}
        entries: list[ConfEntry] = []
        for position, raw_entry in enumerate(raw_entries, start=1):
            item_label = f"{source_label} entry #{position}"
            key, conf_type, default = SchemaLoader._read_entry(raw_entry, item_label)
            if key in types:
                raise ValueError(f"{item_label} duplicates key `{key}`.")
            types[key] = conf_type
            if default is not None:
                values[key] = SchemaLoader._coerce_default(conf_type, default, item_label)
            entries.append(ConfEntry.of(conf_type, item_setter(values, key), key))

        return BoundSchema(entries=tuple(entries), values=values, types=types)

    @staticmethod
    def _read_entry(raw_entry: object, item_label: str) -> tuple[str, ConfType, Any]:
        """Validate one raw entry mapping and return its key, type and default."""

        if not isinstance(raw_entry, Mapping):
            raise ValueError(f"{item_label} must be a mapping/object.")

        supported = SchemaLoader._SUPPORTED_ENTRY_KEYS
        unknown = sorted(str(key) for key in set(raw_entry).difference(supported))
        if unknown:
            raise ValueError(f"{item_label} includes unsupported key(s): {', '.join(unknown)}.")
        missing = sorted(SchemaLoader._REQUIRED_ENTRY_KEYS.difference(raw_entry))
        if missing:
            raise ValueError(f"{item_label} is missing required key(s): {', '.join(missing)}.")

        key = raw_entry["key"]
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"{item_label} requires a non-empty string `key`.")
        try:
            conf_type = parse_conf_type(raw_entry["type"])
        except ValueError as exc:
            raise ValueError(f"{item_label}: {exc}") from exc
        return key.strip(), conf_type, raw_entry.get("default")

    @staticmethod
    def _coerce_default(conf_type: ConfType, value: Any, item_label: str) -> Any:
        """Check a YAML default against the declared type.

        Native YAML scalars are type-checked; string defaults for non-string
        types go through the same strict coercion as config file values.
        """

        if isinstance(value, str) and conf_type is not ConfType.STR:
            coerce, _ = COERCERS[conf_type]
            try:
                return coerce(value)
            except ValueError as exc:
                raise ValueError(f"{item_label} has an invalid `default`: {exc}") from exc

        if conf_type is ConfType.BOOL and isinstance(value, bool):
            return value
        if conf_type is ConfType.INT and isinstance(value, int) and not isinstance(value, bool):
            return value
        if conf_type in (ConfType.FLOAT, ConfType.DOUBLE) and isinstance(
            value, (int, float)
        ) and not isinstance(value, bool):
            as_float = float(value)
            if conf_type is ConfType.FLOAT:
                return narrow_to_single(as_float)
            return as_float
        if conf_type is ConfType.STR and isinstance(value, str):
            return value
        raise ValueError(
            f"{item_label} has a `default` that is not a valid {conf_type.value} value."
        )
