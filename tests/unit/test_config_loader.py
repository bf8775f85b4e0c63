"""Unit tests for parser settings resolution and YAML schema loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from microconf.coercion import narrow_to_single
from microconf.config import (
    ParserSettings,
    SchemaLoader,
    SettingsLoader,
    SettingsSources,
    parse_match_mode,
)
from microconf.parser import MatchMode, parse
from microconf.schema import ConfType, DoubleSlot, StrSlot


def test_settings_default_to_prefix_mode_and_utf8() -> None:
    """Without any source, settings use the faithful defaults."""

    settings = SettingsLoader.resolve()

    assert settings == ParserSettings(match_mode=MatchMode.PREFIX, encoding="utf-8")


def test_settings_cli_values_override_env() -> None:
    """CLI values win over environment values, which win over defaults."""

    sources = SettingsSources(
        cli={"match_mode": " prefix "},
        env={"MICROCONF_MATCH_MODE": "exact-token", "MICROCONF_ENCODING": "latin-1"},
    )

    settings = SettingsLoader.resolve(sources)

    assert settings.match_mode is MatchMode.PREFIX
    assert settings.encoding == "latin-1"


def test_settings_from_env_accepts_underscore_mode() -> None:
    """`exact_token` is accepted as a spelling of `exact-token`; blank values are ignored."""

    settings = SettingsLoader.from_env(
        {"MICROCONF_MATCH_MODE": "EXACT_TOKEN", "MICROCONF_ENCODING": "   "}
    )

    assert settings.match_mode is MatchMode.EXACT_TOKEN
    assert settings.encoding == "utf-8"


def test_settings_reject_unknown_mode_and_encoding() -> None:
    """Invalid settings fail with actionable messages."""

    with pytest.raises(ValueError, match="Unsupported match mode `longest`"):
        parse_match_mode("longest")
    with pytest.raises(ValueError, match="Unknown `encoding` value `klingon`"):
        SettingsLoader.resolve(SettingsSources(cli={"encoding": "klingon"}))


def test_schema_loader_from_yaml_binds_entries_and_defaults(demo_schema_path: Path) -> None:
    """YAML schemas keep entry order and pre-populate typed defaults."""

    bound = SchemaLoader.from_yaml(demo_schema_path)

    assert [entry.key for entry in bound.entries] == [
        "an_integer",
        "a_float",
        "a_double",
        "a_bool",
        "a_char",
        "a_str",
        "vec.x",
        "vec.y",
    ]
    assert isinstance(bound.entries[2].target, DoubleSlot)
    assert isinstance(bound.entries[5].target, StrSlot)
    assert bound.types["a_bool"] is ConfType.BOOL
    assert bound.values == {
        "an_integer": 10,
        "a_float": 11.0,
        "a_double": 123.123,
        "a_bool": True,
        "a_char": "F",
        "a_str": "test",
        "vec.x": 1,
        "vec.y": 1,
    }


def test_bound_schema_receives_parsed_values(
    demo_schema_path: Path, demo_config_path: Path
) -> None:
    """Parsing into a bound schema overwrites its defaults in place."""

    bound = SchemaLoader.from_yaml(demo_schema_path)

    parse(bound.entries, demo_config_path)

    assert bound.values["an_integer"] == 69
    assert bound.values["a_float"] == narrow_to_single(420.1)
    assert bound.values["a_str"] == "here is a string"
    assert bound.values["vec.y"] == 200


def test_schema_loader_coerces_string_defaults_strictly() -> None:
    """String defaults for typed entries use the config-file coercion rules."""

    bound = SchemaLoader.from_mapping(
        {
            "entries": [
                {"key": "n", "type": "int", "default": "42"},
                {"key": "ratio", "type": "float", "default": 0.1},
                {"key": "label", "type": "str"},
            ]
        },
        source_label="inline",
    )

    assert bound.values == {"n": 42, "ratio": narrow_to_single(0.1)}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({}, "requires a non-empty `entries` list"),
        ({"entries": {"key": "n"}}, "requires a non-empty `entries` list"),
        ({"entries": [], "extra": 1}, r"unsupported key\(s\): extra"),
        ({"entries": ["n"]}, "entry #1 must be a mapping/object"),
        ({"entries": [{"key": "n"}]}, r"missing required key\(s\): type"),
        ({"entries": [{"key": "n", "type": "int", "help": "x"}]}, r"unsupported key\(s\): help"),
        ({"entries": [{"key": " ", "type": "int"}]}, "non-empty string `key`"),
        ({"entries": [{"key": "n", "type": "list"}]}, "Unsupported entry type `list`"),
        (
            {"entries": [{"key": "n", "type": "int"}, {"key": "n", "type": "str"}]},
            "entry #2 duplicates key `n`",
        ),
        ({"entries": [{"key": "n", "type": "int", "default": "abc"}]}, "invalid `default`"),
        ({"entries": [{"key": "b", "type": "bool", "default": 1}]}, "not a valid bool value"),
        ({"entries": [{"key": "n", "type": "int", "default": True}]}, "not a valid int value"),
        ({"entries": [{"key": "c", "type": "char", "default": "ab"}]}, "invalid `default`"),
    ],
)
def test_schema_loader_rejects_invalid_payloads(payload: dict, message: str) -> None:
    """Schema validation errors name the offending item."""

    with pytest.raises(ValueError, match=message):
        SchemaLoader.from_mapping(payload, source_label="inline")


def test_schema_loader_rejects_non_mapping_root(tmp_path: Path) -> None:
    """A YAML list at the root is not a schema document."""

    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text("- key: n\n  type: int\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a top-level mapping/object"):
        SchemaLoader.from_yaml(schema_path)
