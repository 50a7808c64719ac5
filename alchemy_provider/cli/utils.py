"""CLI utility functions."""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

import alchemy_provider.cli as cli
from alchemy_provider.exceptions import (
    BindingResolutionError,
    ConnectionNotConfiguredError,
    EntityNotMappedError,
    MissingConfigurationError,
    MissingConnectionKeyError,
    SchemaToolError,
    UnknownFilterError,
    UnsupportedDriverError,
)

if TYPE_CHECKING:
    from alchemy_provider.framework.application import Application

logger = logging.getLogger("alchemy-provider")

# errors reported to the user instead of a traceback
CLI_ERRORS = (
    FileNotFoundError,
    ImportError,
    TypeError,
    SQLAlchemyError,
    BindingResolutionError,
    ConnectionNotConfiguredError,
    EntityNotMappedError,
    MissingConfigurationError,
    MissingConnectionKeyError,
    SchemaToolError,
    UnknownFilterError,
    UnsupportedDriverError,
)


def setup_logging(verbose: bool = False) -> None:
    """Show wiring details of the library when verbose."""
    logging.getLogger("alchemy-provider").setLevel(logging.DEBUG if verbose else logging.INFO)


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        ``cli.CONFIG_PATH`` when set by the CLI callback, otherwise ``./config``.
    """
    return cli.CONFIG_PATH if cli.CONFIG_PATH is not None else Path.cwd() / "config"


def get_application() -> "Application":
    """Build and boot an application from the config directory with the ORM provider registered."""
    from alchemy_provider.framework.application import Application
    from alchemy_provider.provider import OrmServiceProvider

    config_dir = get_config_dir()
    app = Application.from_config_dir(config_dir, base_path=config_dir.parent)
    app.register(OrmServiceProvider)
    app.boot()
    return app


def format_statements(statements: Iterable[str]) -> str:
    return "\n".join(f"{statement};" for statement in statements)
