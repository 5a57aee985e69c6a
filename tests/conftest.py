"""Shared test fixtures for vrux tests."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from vrux.config import write_config_template
from vrux.core import VersionStore
from vrux.models import Author


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def alice() -> Author:
    """Default author for created versions."""
    return Author(id="alice", name="Alice")


@pytest.fixture
def store() -> VersionStore:
    """In-memory version store with default settings."""
    return VersionStore()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Project directory with an initialized .vrux config."""
    vrux_dir = tmp_path / ".vrux"
    vrux_dir.mkdir()
    write_config_template(vrux_dir)
    return tmp_path


@pytest.fixture
def component_file(tmp_path: Path) -> Path:
    """A small component source file."""
    path = tmp_path / "Button.jsx"
    path.write_text("export const Button = () => (\n  <button>Click</button>\n);\n")
    return path
