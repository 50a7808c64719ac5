"""Tests for alchemy_provider.cli.commands.publish module."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from alchemy_provider.cli.app import app
from alchemy_provider.provider import PACKAGE_CONFIG


@pytest.fixture
def empty_config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


def publish(cli_runner: CliRunner, config_dir: Path, *args: str):
    return cli_runner.invoke(app, ["--config-path", str(config_dir), "publish", *args])


class TestPublish:
    """Tests for the 'publish' command."""

    def test_copies_the_orm_config(self, cli_runner: CliRunner, empty_config_dir: Path) -> None:
        result = publish(cli_runner, empty_config_dir)

        assert result.exit_code == 0
        assert "Copied orm.yaml" in result.stdout
        assert "Publishing complete." in result.stdout
        assert (empty_config_dir / "orm.yaml").read_text() == PACKAGE_CONFIG.read_text()

    def test_skips_existing_files(self, cli_runner: CliRunner, empty_config_dir: Path) -> None:
        empty_config_dir.mkdir()
        (empty_config_dir / "orm.yaml").write_text("metadata: []\n")

        result = publish(cli_runner, empty_config_dir)

        assert result.exit_code == 0
        assert "Skipped" in result.stdout
        assert "already exists" in result.stdout
        assert (empty_config_dir / "orm.yaml").read_text() == "metadata: []\n"

    def test_force_overwrites(self, cli_runner: CliRunner, empty_config_dir: Path) -> None:
        empty_config_dir.mkdir()
        (empty_config_dir / "orm.yaml").write_text("metadata: []\n")

        result = publish(cli_runner, empty_config_dir, "--force")

        assert result.exit_code == 0
        assert "Copied orm.yaml" in result.stdout
        assert (empty_config_dir / "orm.yaml").read_text() == PACKAGE_CONFIG.read_text()

    def test_matching_tag(self, cli_runner: CliRunner, empty_config_dir: Path) -> None:
        result = publish(cli_runner, empty_config_dir, "--tag", "config")

        assert result.exit_code == 0
        assert (empty_config_dir / "orm.yaml").exists()

    def test_unknown_tag(self, cli_runner: CliRunner, empty_config_dir: Path) -> None:
        result = publish(cli_runner, empty_config_dir, "--tag", "views")

        assert result.exit_code == 0
        assert "Nothing to publish." in result.stdout
        assert not (empty_config_dir / "orm.yaml").exists()
