from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from alchemy_provider.exceptions import UnknownFieldError
from alchemy_provider.orm.metadata import ClassMetadata

if TYPE_CHECKING:
    from alchemy_provider.orm.entity_manager import EntityManager

T = TypeVar("T")

_DIRECTIONS = ("asc", "desc")


class EntityRepository(Generic[T]):
    """Query entities of one class by field criteria.

    Criteria map field names to values: ``None`` matches NULL, a list or
    tuple matches any of its items, anything else matches by equality.

    Args:
        entity_manager: Manager whose session runs the queries.
        class_metadata: Metadata of the entity class.
    """

    def __init__(self, entity_manager: "EntityManager", class_metadata: ClassMetadata):
        self.entity_manager = entity_manager
        self.class_metadata = class_metadata
        self.entity_class: type[T] = class_metadata.entity_class

    @property
    def session(self) -> Session:
        return self.entity_manager.session

    def create_query(self) -> Select:
        return select(self.entity_class)

    def find(self, identifier: Any) -> T | None:
        return self.entity_manager.find(self.entity_class, identifier)

    def find_all(self) -> list[T]:
        return self.find_by({})

    def find_by(
        self,
        criteria: Mapping[str, Any],
        order_by: Mapping[str, str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[T]:
        """Find entities matching all criteria.

        Args:
            criteria: Field name to value.
            order_by: Field name to ``"asc"`` or ``"desc"``.
            limit: Maximum number of results.
            offset: Number of results to skip.

        Returns:
            Matching entities.

        Raises:
            UnknownFieldError: If a criteria or ordering field does not exist.
            ValueError: If an ordering direction is neither asc nor desc.
        """
        stmt = self._apply_criteria(self.create_query(), criteria)
        for name, direction in (order_by or {}).items():
            direction = direction.lower()
            if direction not in _DIRECTIONS:
                raise ValueError(f"Invalid order direction '{direction}' for field '{name}'")  # noqa: TRY003
            column = self._field(name)
            stmt = stmt.order_by(column.desc() if direction == "desc" else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return list(self.session.scalars(stmt).all())

    def find_one_by(self, criteria: Mapping[str, Any], order_by: Mapping[str, str] | None = None) -> T | None:
        results = self.find_by(criteria, order_by, limit=1)
        return results[0] if results else None

    def count(self, criteria: Mapping[str, Any] | None = None) -> int:
        stmt = self._apply_criteria(select(func.count()).select_from(self.entity_class), criteria or {})
        return self.session.scalar(stmt) or 0

    def exists(self, criteria: Mapping[str, Any]) -> bool:
        return self.find_one_by(criteria) is not None

    def _field(self, name: str) -> Any:
        if not self.class_metadata.has_field(name):
            raise UnknownFieldError(self.entity_class.__name__, name)
        return getattr(self.entity_class, name)

    def _apply_criteria(self, stmt: Select, criteria: Mapping[str, Any]) -> Select:
        for name, value in criteria.items():
            column = self._field(name)
            if value is None:
                stmt = stmt.where(column.is_(None))
            elif isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(column.in_(value))
            else:
                stmt = stmt.where(column == value)
        return stmt
