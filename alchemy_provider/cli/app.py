"""Typer-based CLI application for alchemy-provider."""

import logging
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated

import typer

import alchemy_provider.cli as cli
from alchemy_provider.cli.commands.mapping import mapping_app
from alchemy_provider.cli.commands.publish import publish
from alchemy_provider.cli.commands.schema import schema_app
from alchemy_provider.cli.utils import setup_logging

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"alchemy-provider {get_version('alchemy-provider')}")
        raise typer.Exit()


app = typer.Typer(
    name="alchemy-provider",
    help="alchemy-provider CLI - manage the database schema of ORM entities.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config-path",
            "-cp",
            help="Path to configuration directory",
            envvar="ALCHEMY_PROVIDER_CONFIG_PATH",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """alchemy-provider CLI - manage the database schema of ORM entities.

    Global options are processed before any command.
    """
    cli.CONFIG_PATH = (config_path or Path.cwd() / "config").resolve()
    setup_logging(verbose)


app.add_typer(schema_app, name="schema")
app.add_typer(mapping_app, name="mapping")

app.command(name="publish")(publish)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
