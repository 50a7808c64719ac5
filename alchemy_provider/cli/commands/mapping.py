"""Mapping commands."""

import typer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import configure_mappers

from alchemy_provider.cli.utils import CLI_ERRORS, get_application

mapping_app = typer.Typer(name="mapping", help="Inspect entity mappings.", no_args_is_help=True)


@mapping_app.command(name="configure")
def configure_mappings() -> None:
    """Configure the mappers of all entities and list them with their tables."""
    from alchemy_provider.orm import ClassMetadataFactory

    try:
        metadata_list = get_application().make(ClassMetadataFactory).get_all_metadata()
    except CLI_ERRORS as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    if not metadata_list:
        typer.echo("No mapped entities found.")
        return

    try:
        configure_mappers()
    except SQLAlchemyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    for metadata in sorted(metadata_list, key=lambda m: m.qualified_name):
        typer.echo(f"  [OK] {metadata.qualified_name} -> {metadata.table_name}")
    typer.echo(f"Configured {len(metadata_list)} entities.")
