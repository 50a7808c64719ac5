"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect
from typer.testing import CliRunner

import alchemy_provider.cli as cli
from alchemy_provider.framework.provider import ServiceProvider


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CliRunner for testing commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_cli_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Restore cli.CONFIG_PATH and the publish registry after each test."""
    monkeypatch.setattr(cli, "CONFIG_PATH", None)
    monkeypatch.setattr(ServiceProvider, "_publishes", {})


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "database.sqlite"


@pytest.fixture
def config_dir(tmp_path: Path, database_path: Path) -> Path:
    """Config directory with an SQLite file connection and the sample entities."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "app.yaml").write_text("debug: false\nkey: cli-test-key\n")
    (config_dir / "database.yaml").write_text(
        f"""default: sqlite
connections:
  sqlite:
    driver: sqlite
    database: {database_path}
"""
    )
    (config_dir / "orm.yaml").write_text("metadata:\n  - sample_entities\n")
    return config_dir


@pytest.fixture
def table_names(database_path: Path):
    """Return a callable listing the tables of the test database."""

    def _table_names() -> set[str]:
        engine = create_engine(f"sqlite:///{database_path}")
        try:
            return set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

    return _table_names
