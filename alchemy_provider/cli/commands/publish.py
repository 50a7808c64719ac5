"""Publish command: copy provider config files into the application."""

import shutil
from typing import Annotated

import typer
from rich.console import Console

from alchemy_provider.cli.utils import get_application, get_config_dir

console = Console()


def publish(
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite files that already exist.")] = False,
    tag: Annotated[str | None, typer.Option("--tag", help="Only publish files of this group.")] = None,
) -> None:
    """Copy publishable config files into the config directory."""
    from alchemy_provider.framework.provider import ServiceProvider

    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_application()

    paths = ServiceProvider.paths_to_publish(group=tag)
    if not paths:
        console.print("[yellow]Nothing to publish.[/yellow]")
        return

    copied = skipped = 0
    for source, destination in paths.items():
        if destination.exists() and not force:
            console.print(f"  [yellow]Skipped[/yellow] {destination} (already exists)", soft_wrap=True)
            skipped += 1
            continue
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
        console.print(f"  [green]Copied[/green] {source.name} -> {destination}", soft_wrap=True)
        copied += 1
    console.print(f"Publishing complete. {copied} copied, {skipped} skipped")
