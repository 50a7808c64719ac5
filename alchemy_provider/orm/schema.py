"""Create, update and drop database tables for mapped entities."""

import logging
from collections.abc import Iterable
from typing import Any

from alembic.autogenerate import compare_metadata
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Connection, MetaData, Table, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateIndex, CreateTable, DropTable, sort_tables

from alchemy_provider.exceptions import SchemaToolError
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.metadata import ClassMetadata

logger = logging.getLogger("alchemy-provider")

EntityClasses = Iterable[type | ClassMetadata] | None

_ADDITIONS = ("add_table", "add_column", "add_index")
_REMOVALS = ("remove_table", "remove_column", "remove_index")


class _StatementCollector:
    """Output buffer collecting the statements alembic renders in offline mode."""

    def __init__(self):
        self.statements: list[str] = []

    def write(self, text: str) -> None:
        text = text.strip()
        if text:
            self.statements.append(text.removesuffix(";").strip())

    def flush(self) -> None:
        pass


class SchemaTool:
    """Schema operations over the tables of mapped entities.

    Every method takes an optional list of entity classes (or their
    metadata); by default all entities loaded by the entity manager are used.
    """

    def __init__(self, entity_manager: EntityManager):
        self.entity_manager = entity_manager
        self.engine = entity_manager.engine

    def create_schema(self, classes: EntityClasses = None) -> None:
        tables = self._tables(classes)
        try:
            with self.engine.begin() as connection:
                for table in tables:
                    table.create(connection)
        except SQLAlchemyError as e:
            raise SchemaToolError("create", str(e)) from e
        logger.info(f"Created {len(tables)} table(s)")

    def get_create_schema_sql(self, classes: EntityClasses = None) -> list[str]:
        dialect = self.engine.dialect
        statements = []
        for table in self._tables(classes):
            statements.append(str(CreateTable(table).compile(dialect=dialect)).strip())
            for index in sorted(table.indexes, key=lambda index: index.name or ""):
                statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip())
        return statements

    def update_schema(self, classes: EntityClasses = None, save_mode: bool = True) -> None:
        """Bring the database in line with the mapped tables.

        Args:
            classes: Entities to compare. Defaults to every loaded entity.
            save_mode: Only add tables, columns and indexes. When False, tables,
                columns and indexes the entities do not map are dropped too.
        """
        tables = self._tables(classes)
        try:
            with self.engine.begin() as connection:
                diffs = self._diff(connection, tables)
                self._apply(MigrationContext.configure(connection).impl, diffs, save_mode)
        except SQLAlchemyError as e:
            raise SchemaToolError("update", str(e)) from e

    def get_update_schema_sql(self, classes: EntityClasses = None, save_mode: bool = True) -> list[str]:
        tables = self._tables(classes)
        try:
            with self.engine.connect() as connection:
                diffs = self._diff(connection, tables)
        except SQLAlchemyError as e:
            raise SchemaToolError("update", str(e)) from e

        collector = _StatementCollector()
        context = MigrationContext.configure(
            dialect=self.engine.dialect, opts={"as_sql": True, "output_buffer": collector}
        )
        self._apply(context.impl, diffs, save_mode)
        return collector.statements

    def drop_schema(self, classes: EntityClasses = None) -> None:
        """Drop the entities' tables that exist, dependents first."""
        tables = self._tables(classes)
        try:
            with self.engine.begin() as connection:
                existing = set(inspect(connection).get_table_names())
                for table in reversed(tables):
                    if table.name in existing:
                        table.drop(connection)
        except SQLAlchemyError as e:
            raise SchemaToolError("drop", str(e)) from e

    def get_drop_schema_sql(self, classes: EntityClasses = None) -> list[str]:
        tables = self._tables(classes)
        try:
            with self.engine.connect() as connection:
                existing = set(inspect(connection).get_table_names())
        except SQLAlchemyError as e:
            raise SchemaToolError("drop", str(e)) from e
        dialect = self.engine.dialect
        return [str(DropTable(table).compile(dialect=dialect)).strip() for table in reversed(tables) if table.name in existing]

    def _tables(self, classes: EntityClasses) -> list[Table]:
        factory = self.entity_manager.metadata_factory
        if classes is None:
            metadata_list = factory.get_all_metadata()
        else:
            metadata_list = [c if isinstance(c, ClassMetadata) else factory.get_metadata_for(c) for c in classes]

        tables: list[Table] = []
        for metadata in metadata_list:
            # single table inheritance shares one table between classes
            if metadata.table not in tables:
                tables.append(metadata.table)
        return sort_tables(tables)

    @staticmethod
    def _diff(connection: Connection, tables: list[Table]) -> list[Any]:
        target = MetaData()
        for table in tables:
            table.to_metadata(target)
        return compare_metadata(MigrationContext.configure(connection), target)

    @staticmethod
    def _apply(impl: Any, diffs: list[Any], save_mode: bool) -> None:
        diffed_indexes = {diff[1].name for diff in diffs if not isinstance(diff, list) and diff[0] == "add_index"}
        for diff in diffs:
            # column modifications arrive grouped in lists
            if isinstance(diff, list) or diff[0] not in (*_ADDITIONS, *_REMOVALS):
                logger.debug(f"Skipping unsupported schema change {diff!r}")
                continue
            operation = diff[0]
            if save_mode and operation in _REMOVALS:
                continue

            if operation == "add_table":
                _create_table(impl, diff[1], diffed_indexes)
            elif operation == "remove_table":
                impl.drop_table(diff[1])
            elif operation == "add_column":
                _, schema, table_name, column = diff
                impl.add_column(table_name, column, schema=schema)
            elif operation == "remove_column":
                _, schema, table_name, column = diff
                impl.drop_column(table_name, column, schema=schema)
            elif operation == "add_index":
                impl.create_index(diff[1])
            elif operation == "remove_index":
                impl.drop_index(diff[1])
            logger.debug(f"Applied schema change '{operation}'")


def _create_table(impl: Any, table: Table, diffed_indexes: set[str | None]) -> None:
    """Create a new table without indexes, then those the diff does not list as ``add_index``."""
    own_indexes = sorted(
        (index for index in table.indexes if index.name not in diffed_indexes), key=lambda index: index.name or ""
    )
    table.indexes.clear()
    impl.create_table(table)
    for index in own_indexes:
        impl.create_index(index)
