"""Global query filters applied to every ORM SELECT."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import with_loader_criteria
from sqlalchemy.orm.util import LoaderCriteriaOption
from typing_extensions import Self

from alchemy_provider.exceptions import FilterNotEnabledError, UnknownFilterError
from alchemy_provider.orm.mixins import SoftDeletes, utcnow

if TYPE_CHECKING:
    from alchemy_provider.orm.entity_manager import EntityManager

logger = logging.getLogger("alchemy-provider")

# execution option bypassing filters: True for all of them, or an iterable of filter names
SKIP_FILTERS = "skip_filters"


class SQLFilter(ABC):
    """A named filter producing loader criteria for the statements it applies to."""

    def __init__(self, entity_manager: "EntityManager"):
        self.entity_manager = entity_manager
        self._parameters: dict[str, Any] = {}

    def set_parameter(self, name: str, value: Any) -> Self:
        self._parameters[name] = value
        return self

    def get_parameter(self, name: str) -> Any:
        return self._parameters[name]

    def has_parameter(self, name: str) -> bool:
        return name in self._parameters

    @abstractmethod
    def loader_criteria(self) -> LoaderCriteriaOption: ...


class TrashedFilter(SQLFilter):
    """Hide soft-deleted rows of ``SoftDeletes`` entities."""

    def loader_criteria(self) -> LoaderCriteriaOption:
        now = utcnow()
        return with_loader_criteria(
            SoftDeletes,
            lambda cls: cls.deleted_at.is_(None) | (cls.deleted_at > now),
            include_aliases=True,
        )


class FilterCollection:
    """Filters enabled on one entity manager."""

    def __init__(self, entity_manager: "EntityManager"):
        self.entity_manager = entity_manager
        self._enabled: dict[str, SQLFilter] = {}

    @property
    def enabled_filters(self) -> dict[str, SQLFilter]:
        return dict(self._enabled)

    def enable(self, name: str) -> SQLFilter:
        """Enable a filter added to the configuration and return its instance.

        Raises:
            UnknownFilterError: If no filter class was added under ``name``.
        """
        if name not in self._enabled:
            filter_class = self.entity_manager.configuration.get_filter_class(name)
            if filter_class is None:
                raise UnknownFilterError(name)
            self._enabled[name] = filter_class(self.entity_manager)
            logger.debug(f"Enabled filter '{name}'")
        return self._enabled[name]

    def disable(self, name: str) -> SQLFilter:
        filter_instance = self.get_filter(name)
        del self._enabled[name]
        logger.debug(f"Disabled filter '{name}'")
        return filter_instance

    def get_filter(self, name: str) -> SQLFilter:
        if name not in self._enabled:
            if self.entity_manager.configuration.get_filter_class(name) is None:
                raise UnknownFilterError(name)
            raise FilterNotEnabledError(name)
        return self._enabled[name]

    def is_enabled(self, name: str) -> bool:
        return name in self._enabled

    def loader_criteria(self, skip: Iterable[str] = ()) -> list[LoaderCriteriaOption]:
        skipped = set(skip)
        return [f.loader_criteria() for name, f in self._enabled.items() if name not in skipped]
