"""Tests for alchemy_provider.orm.schema module."""

from types import SimpleNamespace

import pytest
from sqlalchemy import Integer, String, inspect, text
from sqlalchemy.orm import Mapped, mapped_column

from alchemy_provider.exceptions import SchemaToolError
from alchemy_provider.orm import Configuration, Entity, EntityManager, SchemaTool

from entity_factories import make_blog_entities


@pytest.fixture
def entities(entity_manager: EntityManager) -> SimpleNamespace:
    entities = make_blog_entities()
    for cls in (entities.User, entities.Post, entities.Tag):
        entity_manager.get_class_metadata(cls)
    return entities


@pytest.fixture
def tool(entity_manager: EntityManager) -> SchemaTool:
    return SchemaTool(entity_manager)


def table_names(entity_manager: EntityManager) -> set[str]:
    return set(inspect(entity_manager.engine).get_table_names())


class TestCreate:
    """Tests for creating tables."""

    def test_create_schema_for_all_loaded_entities(self, entity_manager, entities, tool: SchemaTool) -> None:
        tool.create_schema()

        assert table_names(entity_manager) == {"users", "posts", "tags"}

    def test_create_schema_sql(self, entities, tool: SchemaTool) -> None:
        statements = tool.get_create_schema_sql()

        creates = [s for s in statements if s.startswith("CREATE TABLE")]
        assert len(creates) == 3
        # referenced tables come first
        assert statements.index(next(s for s in creates if "posts" in s)) > statements.index(
            next(s for s in creates if "users" in s)
        )
        assert any("display_name" in s for s in creates)

    def test_create_existing_table_fails(self, entities, tool: SchemaTool) -> None:
        tool.create_schema([entities.Tag])

        with pytest.raises(SchemaToolError, match="Schema create failed"):
            tool.create_schema([entities.Tag])


class TestUpdate:
    """Tests for updating the schema."""

    def test_adds_missing_tables(self, entity_manager, entities, tool: SchemaTool) -> None:
        tool.create_schema([entities.Tag])

        statements = tool.get_update_schema_sql()

        assert len([s for s in statements if s.startswith("CREATE TABLE")]) == 2
        tool.update_schema()
        assert table_names(entity_manager) == {"users", "posts", "tags"}
        assert tool.get_update_schema_sql() == []

    def test_adds_missing_columns(self, entity_manager, entities, tool: SchemaTool) -> None:
        with entity_manager.engine.begin() as connection:
            connection.execute(text("CREATE TABLE tags (id INTEGER NOT NULL PRIMARY KEY)"))

        statements = tool.get_update_schema_sql([entities.Tag])

        assert len(statements) == 1
        assert statements[0].startswith("ALTER TABLE tags ADD COLUMN name VARCHAR(50)")

    def test_save_mode_keeps_unmapped_tables(self, entity_manager, entities, tool: SchemaTool) -> None:
        tool.create_schema()
        with entity_manager.engine.begin() as connection:
            connection.execute(text("CREATE TABLE legacy (id INTEGER PRIMARY KEY)"))

        assert tool.get_update_schema_sql() == []
        assert tool.get_update_schema_sql(save_mode=False) == ["DROP TABLE legacy"]

        tool.update_schema(save_mode=False)

        assert "legacy" not in table_names(entity_manager)

    def test_indexes_of_new_tables_are_created_once(self, entity_manager: EntityManager, tool: SchemaTool) -> None:
        class Coin(Entity):
            id: Mapped[int] = mapped_column(Integer, primary_key=True)
            symbol: Mapped[str] = mapped_column(String(10), index=True)

        entity_manager.get_class_metadata(Coin)

        tool.update_schema()

        assert [index["name"] for index in inspect(entity_manager.engine).get_indexes("coins")] == ["ix_coins_symbol"]

    def test_update_sql_lists_new_table_indexes_once(self, entity_manager: EntityManager, tool: SchemaTool) -> None:
        class Mint(Entity):
            id: Mapped[int] = mapped_column(Integer, primary_key=True)
            code: Mapped[str] = mapped_column(String(10), index=True)

        entity_manager.get_class_metadata(Mint)

        statements = tool.get_update_schema_sql([Mint])

        assert statements[0].startswith("CREATE TABLE mints")
        index_statements = [statement for statement in statements if statement.startswith("CREATE INDEX")]
        assert len(index_statements) == 1
        assert "ix_mints_code" in index_statements[0]


class TestDrop:
    """Tests for dropping tables."""

    def test_drop_schema(self, entity_manager, entities, tool: SchemaTool) -> None:
        tool.create_schema()

        tool.drop_schema()

        assert table_names(entity_manager) == set()

    def test_drop_sql_only_lists_existing_tables(self, entities, tool: SchemaTool) -> None:
        tool.create_schema([entities.Tag])

        assert tool.get_drop_schema_sql() == ["DROP TABLE tags"]

    def test_drop_sql_orders_dependents_first(self, entities, tool: SchemaTool) -> None:
        tool.create_schema()

        statements = tool.get_drop_schema_sql()

        assert statements.index("DROP TABLE posts") < statements.index("DROP TABLE users")

    def test_unreachable_database_is_reported(self, tmp_path) -> None:
        em = EntityManager.create(f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}", Configuration.create([]))
        em.get_class_metadata(make_blog_entities().Tag)
        tool = SchemaTool(em)

        try:
            with pytest.raises(SchemaToolError, match="Schema drop failed"):
                tool.get_drop_schema_sql()
            with pytest.raises(SchemaToolError, match="Schema drop failed"):
                tool.drop_schema()
        finally:
            em.engine.dispose()
