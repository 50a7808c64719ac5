"""Database presence checks backing ``unique`` and ``exists`` validation rules."""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sqlalchemy import Select, Table, func, select

from alchemy_provider.exceptions import EntityNotMappedError
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.metadata import ClassMetadata


class EntityPresenceVerifier:
    """Count matching rows of an entity or table.

    A collection is an entity class, an entity class name or a table name.
    Entity collections address fields by attribute name and pass through the
    entity manager's filters; plain tables address columns by name.

    Args:
        entity_manager_factory: Returns the entity manager; called on each check.
    """

    def __init__(self, entity_manager_factory: Callable[[], EntityManager]):
        self._entity_manager = entity_manager_factory

    def get_count(
        self,
        collection: Any,
        column: str,
        value: Any,
        exclude_id: Any = None,
        id_column: str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> int:
        """Count rows whose ``column`` equals ``value``.

        Args:
            collection: Entity class, entity class name or table name.
            column: Field compared with ``value``.
            value: Value looked up.
            exclude_id: Identifier of a row to leave out, typically the record being updated.
                ``None`` and the string ``"NULL"`` exclude nothing.
            id_column: Field holding the identifier. Defaults to ``id``.
            extra: Additional conditions; see :meth:`_add_where`.
        """
        em = self._entity_manager()
        source, field = self._resolve(em, collection)
        stmt = select(func.count()).select_from(source).where(field(column) == value)
        if exclude_id is not None and exclude_id != "NULL":
            stmt = stmt.where(field(id_column or "id") != exclude_id)
        stmt = self._add_conditions(stmt, field, extra)
        return em.session.scalar(stmt) or 0

    def get_multi_count(
        self, collection: Any, column: str, values: Iterable[Any], extra: Mapping[str, Any] | None = None
    ) -> int:
        """Count rows whose ``column`` is any of ``values``."""
        em = self._entity_manager()
        source, field = self._resolve(em, collection)
        stmt = select(func.count()).select_from(source).where(field(column).in_(list(values)))
        stmt = self._add_conditions(stmt, field, extra)
        return em.session.scalar(stmt) or 0

    @classmethod
    def _add_conditions(cls, stmt: Select, field: Callable[[str], Any], extra: Mapping[str, Any] | None) -> Select:
        for key, condition in (extra or {}).items():
            stmt = cls._add_where(stmt, field(key), condition)
        return stmt

    @staticmethod
    def _add_where(stmt: Select, column: Any, condition: Any) -> Select:
        """``"NULL"`` and ``"NOT_NULL"`` test for null, ``"!x"`` excludes ``x``, anything else must equal."""
        if condition == "NULL":
            return stmt.where(column.is_(None))
        if condition == "NOT_NULL":
            return stmt.where(column.is_not(None))
        if isinstance(condition, str) and condition.startswith("!"):
            return stmt.where(column != condition[1:])
        return stmt.where(column == condition)

    @staticmethod
    def _resolve(em: EntityManager, collection: Any) -> tuple[Any, Callable[[str], Any]]:
        factory = em.metadata_factory
        metadata: ClassMetadata | None
        if isinstance(collection, type):
            metadata = em.get_class_metadata(collection)
        else:
            metadata = factory.get_metadata_by_name(str(collection))

        if metadata is not None and metadata.table_name != collection:
            entity_class = metadata.entity_class
            return entity_class, lambda name: getattr(entity_class, name)

        table = metadata.table if metadata is not None else _find_table(em, str(collection))
        return table, lambda name: table.c[name]


def _find_table(em: EntityManager, name: str) -> Table:
    for metadata in em.metadata_factory.get_all_metadata():
        if name in metadata.table.metadata.tables:
            return metadata.table.metadata.tables[name]
    raise EntityNotMappedError(name)
