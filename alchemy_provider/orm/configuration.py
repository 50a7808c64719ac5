from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from alchemy_provider.cache.backends import ArrayCache, Cache
from alchemy_provider.configuration.naming import DefaultNamingStrategy, NamingStrategy
from alchemy_provider.orm.filters import SQLFilter
from alchemy_provider.orm.repository import EntityRepository
from alchemy_provider.orm.sql_logging import SqlLogger


@dataclass
class Configuration:
    """Settings an entity manager is created with."""

    entity_modules: list[str] = field(default_factory=list)
    debug: bool = False
    result_cache: Cache = field(default_factory=ArrayCache)
    naming_strategy: NamingStrategy = field(default_factory=DefaultNamingStrategy)
    default_repository_class: type[EntityRepository] = EntityRepository
    sql_logger: SqlLogger | None = None
    engine_options: dict[str, Any] = field(default_factory=dict)
    filters: dict[str, type[SQLFilter]] = field(default_factory=dict)

    @classmethod
    def create(cls, entity_modules: Iterable[str], debug: bool = False, cache: Cache | None = None) -> "Configuration":
        """Build a configuration, using the in-process cache in debug mode or when no cache is given."""
        if debug or cache is None:
            cache = ArrayCache()
        return cls(entity_modules=list(entity_modules), debug=debug, result_cache=cache)

    def add_filter(self, name: str, filter_class: type[SQLFilter]) -> None:
        self.filters[name] = filter_class

    def get_filter_class(self, name: str) -> type[SQLFilter] | None:
        return self.filters.get(name)
