"""Shared pytest fixtures for the full microconf test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tests.fixture_paths import demo_config_fixture_path, demo_schema_fixture_path


@pytest.fixture
def demo_config_path() -> Path:
    """Provide the demo config file path."""

    return demo_config_fixture_path()


@pytest.fixture
def demo_schema_path() -> Path:
    """Provide the demo YAML schema path."""

    return demo_schema_fixture_path()


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper writing config text to a fresh file under `tmp_path`."""

    def _write(text: str, name: str = "test.conf") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
