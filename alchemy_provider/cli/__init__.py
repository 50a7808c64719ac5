"""alchemy-provider CLI module."""

from pathlib import Path

# resolved --config-path, None until the CLI callback runs
CONFIG_PATH: Path | None = None


def main() -> None:
    """CLI entry point."""
    from alchemy_provider.cli.app import main as app_main

    app_main()


__all__ = ["CONFIG_PATH", "main"]
