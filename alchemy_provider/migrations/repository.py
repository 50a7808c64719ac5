import logging
from collections.abc import Callable

from sqlalchemy import delete, func, inspect, select

from alchemy_provider.migrations.entity import Migration
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.metadata import ClassMetadataFactory
from alchemy_provider.orm.schema import SchemaTool

logger = logging.getLogger("alchemy-provider")


class EntityMigrationRepository:
    """Record which migrations ran, in the ``migrations`` entity table.

    Collaborators are passed as factories so that resolving the repository
    does not build the entity manager.

    Args:
        entity_manager_factory: Returns the entity manager.
        schema_tool_factory: Returns the schema tool used to create the table.
        metadata_factory_factory: Returns the class metadata factory.
    """

    def __init__(
        self,
        entity_manager_factory: Callable[[], EntityManager],
        schema_tool_factory: Callable[[], SchemaTool],
        metadata_factory_factory: Callable[[], ClassMetadataFactory],
    ):
        self._entity_manager_factory = entity_manager_factory
        self._schema_tool_factory = schema_tool_factory
        self._metadata_factory_factory = metadata_factory_factory
        self.source: str | None = None

    def _entity_manager(self) -> EntityManager:
        em = self._entity_manager_factory()
        em.get_class_metadata(Migration)
        return em

    def get_ran(self) -> list[str]:
        em = self._entity_manager()
        stmt = select(Migration.migration).order_by(Migration.batch.asc(), Migration.migration.asc())
        return list(em.session.scalars(stmt).all())

    def get_last(self) -> list[Migration]:
        """Migrations of the last batch, most recent name first."""
        em = self._entity_manager()
        stmt = (
            select(Migration)
            .where(Migration.batch == self.get_last_batch_number())
            .order_by(Migration.migration.desc())
        )
        return list(em.session.scalars(stmt).all())

    def log(self, file: str, batch: int) -> None:
        em = self._entity_manager()
        em.persist(Migration(migration=file, batch=batch))
        em.flush()
        logger.debug(f"Logged migration '{file}' in batch {batch}")

    def delete(self, migration: Migration | str) -> None:
        name = migration.migration if isinstance(migration, Migration) else migration
        em = self._entity_manager()
        with em.transaction():
            em.execute(delete(Migration).where(Migration.migration == name))

    def get_next_batch_number(self) -> int:
        return self.get_last_batch_number() + 1

    def get_last_batch_number(self) -> int:
        em = self._entity_manager()
        return em.session.scalar(select(func.max(Migration.batch))) or 0

    def create_repository(self) -> None:
        metadata = self._metadata_factory_factory().get_metadata_for(Migration)
        self._schema_tool_factory().create_schema([metadata])

    def repository_exists(self) -> bool:
        em = self._entity_manager()
        table_name = em.get_class_metadata(Migration).table_name
        return inspect(em.engine).has_table(table_name)

    def set_source(self, name: str | None) -> None:
        # one entity manager serves every connection name
        self.source = name
