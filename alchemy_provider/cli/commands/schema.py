"""Schema commands: create, update and drop the tables of mapped entities."""

from typing import Annotated

import typer

from alchemy_provider.cli.utils import CLI_ERRORS, format_statements, get_application

schema_app = typer.Typer(
    name="schema",
    help="Create, update or drop the database schema of mapped entities.",
    no_args_is_help=True,
)

SqlOption = Annotated[bool, typer.Option("--sql", help="Dump the SQL statements instead of executing them.")]


def _load_schema():
    from alchemy_provider.orm import ClassMetadataFactory, SchemaTool

    app = get_application()
    return app.make(SchemaTool), app.make(ClassMetadataFactory).get_all_metadata()


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from None


@schema_app.command(name="create")
def create_schema(sql: SqlOption = False) -> None:
    """Create the tables of all mapped entities."""
    try:
        tool, metadata = _load_schema()
        if sql:
            typer.echo("Outputting create query:")
            typer.echo(format_statements(tool.get_create_schema_sql(metadata)))
            return
        typer.echo("Creating database schema...")
        tool.create_schema(metadata)
    except CLI_ERRORS as e:
        _fail(e)
    typer.echo("Schema has been created!")


@schema_app.command(name="update")
def update_schema(
    sql: SqlOption = False,
    clean: Annotated[
        bool,
        typer.Option("--clean", help="Also drop tables, columns and indexes no entity maps."),
    ] = False,
) -> None:
    """Add missing tables, columns and indexes of mapped entities."""
    try:
        tool, metadata = _load_schema()
        typer.echo("Checking if database needs updating....")
        statements = tool.get_update_schema_sql(metadata, save_mode=not clean)
        if not statements:
            typer.echo("No updates found.")
            return
        if sql:
            typer.echo("Outputting update query:")
            typer.echo(format_statements(statements))
            return
        typer.echo("Updating database schema....")
        tool.update_schema(metadata, save_mode=not clean)
    except CLI_ERRORS as e:
        _fail(e)
    typer.echo("Schema has been updated!")


@schema_app.command(name="drop")
def drop_schema(
    sql: SqlOption = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt.")] = False,
) -> None:
    """Drop the tables of all mapped entities."""
    try:
        tool, metadata = _load_schema()
        statements = tool.get_drop_schema_sql(metadata)
        if not statements:
            typer.echo("Current models do not exist in schema.")
            return
        if sql:
            typer.echo("Outputting drop query:")
            typer.echo(format_statements(statements))
            return
        if not yes and not typer.confirm(f"Drop {len(statements)} table(s)?", default=False):
            typer.echo("Aborted.")
            return
        typer.echo("Dropping database schema....")
        tool.drop_schema(metadata)
    except CLI_ERRORS as e:
        _fail(e)
    typer.echo("Schema has been dropped!")
