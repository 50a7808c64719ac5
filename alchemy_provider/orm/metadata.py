"""Entity discovery and lazy mapping."""

import importlib
import inspect
import logging
import pkgutil
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import sqlalchemy
from sqlalchemy import Column, MetaData, Table
from sqlalchemy.orm import Mapper, MappedColumn, registry

from alchemy_provider.configuration.naming import DefaultNamingStrategy, NamingStrategy
from alchemy_provider.exceptions import EntityNotMappedError
from alchemy_provider.orm.entity import EntityOptions, entity_options, is_entity
from alchemy_provider.orm.events import EventManager, Events, LoadClassMetadataEventArgs

logger = logging.getLogger("alchemy-provider")


def mapper_of(cls: Any) -> Mapper | None:
    """Return the mapper of ``cls`` itself; unmapped subclasses of mapped classes give None."""
    # inspect() may answer with a mapped parent's mapper, the class manager is per class
    if not isinstance(cls, type) or "_sa_class_manager" not in cls.__dict__:
        return None
    mapper = sqlalchemy.inspect(cls, raiseerr=False)
    return mapper if mapper is not None and mapper.class_ is cls else None


@dataclass(eq=False)
class ClassMetadata:
    """Mapping information of one entity class.

    ``table_name`` is writable until the class is mapped; afterwards it
    mirrors the mapped table.
    """

    entity_class: type
    table_name: str | None
    options: EntityOptions = field(default_factory=EntityOptions)
    mapper: Mapper | None = None

    @property
    def name(self) -> str:
        return self.entity_class.__name__

    @property
    def qualified_name(self) -> str:
        return f"{self.entity_class.__module__}.{self.entity_class.__qualname__}"

    @property
    def table(self) -> Table:
        return self.mapper.local_table

    @property
    def identifier(self) -> list[str]:
        return [self.mapper.get_property_by_column(column).key for column in self.mapper.primary_key]

    @property
    def field_names(self) -> list[str]:
        return [prop.key for prop in self.mapper.column_attrs]

    def has_field(self, name: str) -> bool:
        return name in self.mapper.attrs

    def get_identifier_values(self, entity: Any) -> dict[str, Any]:
        return {name: getattr(entity, name) for name in self.identifier}


class ClassMetadataFactory:
    """Load entity classes and map them through a SQLAlchemy registry.

    Entities are mapped the first time their metadata is requested. Classes
    that are already mapped, by this factory or any other registry, are
    adopted as they are.

    Args:
        naming_strategy: Supplies table and column names the entity leaves unset.
        event_manager: Receives ``load_class_metadata`` before each class is mapped.
        orm_registry: Registry to map into. A fresh one is created by default.
    """

    def __init__(
        self,
        naming_strategy: NamingStrategy | None = None,
        event_manager: EventManager | None = None,
        orm_registry: registry | None = None,
    ):
        self.naming_strategy = naming_strategy or DefaultNamingStrategy()
        self.event_manager = event_manager or EventManager()
        self.registry = orm_registry or registry()
        self._loaded: dict[type, ClassMetadata] = {}
        self._lock = threading.RLock()

    @property
    def metadata(self) -> MetaData:
        return self.registry.metadata

    def load_modules(self, modules: Iterable[str]) -> list[ClassMetadata]:
        """Import modules (packages recursively) and load every entity they define."""
        loaded = []
        for module_name in modules:
            for cls in self._discover(module_name):
                loaded.append(self.get_metadata_for(cls))
        return loaded

    def get_metadata_for(self, entity_class: type) -> ClassMetadata:
        """Return the metadata of a class, mapping it first if needed.

        Raises:
            EntityNotMappedError: If the class is neither an entity nor mapped.
        """
        with self._lock:
            metadata = self._loaded.get(entity_class)
            if metadata is not None:
                return metadata

            mapper = mapper_of(entity_class)
            if mapper is not None:
                metadata = ClassMetadata(entity_class, mapper.local_table.name, entity_options(entity_class), mapper)
                logger.debug(f"Adopted mapped class {metadata.qualified_name}")
            elif is_entity(entity_class):
                metadata = self._map_entity(entity_class)
            else:
                raise EntityNotMappedError(getattr(entity_class, "__name__", repr(entity_class)))

            self._loaded[entity_class] = metadata
            return metadata

    def has_metadata_for(self, entity_class: type) -> bool:
        return entity_class in self._loaded

    def get_all_metadata(self) -> list[ClassMetadata]:
        return list(self._loaded.values())

    def get_metadata_by_name(self, name: str) -> ClassMetadata | None:
        """Find loaded metadata by class name, qualified class name or table name."""
        for metadata in self._loaded.values():
            if name in (metadata.name, metadata.qualified_name):
                return metadata
        for metadata in self._loaded.values():
            if metadata.table_name == name:
                return metadata
        return None

    def _discover(self, module_name: str) -> list[type]:
        module = importlib.import_module(module_name)
        modules = [module]
        if hasattr(module, "__path__"):
            for info in pkgutil.walk_packages(module.__path__, prefix=f"{module.__name__}."):
                modules.append(importlib.import_module(info.name))

        classes = []
        for mod in modules:
            for _, obj in inspect.getmembers(mod, inspect.isclass):
                if obj.__module__ == mod.__name__ and (is_entity(obj) or mapper_of(obj) is not None):
                    classes.append(obj)
        return classes

    def _map_entity(self, cls: type) -> ClassMetadata:
        # parents first, so inheritance is set up against mapped classes
        for base in reversed(cls.__mro__[1:]):
            if is_entity(base) and mapper_of(base) is None:
                self.get_metadata_for(base)
        inherits = any(mapper_of(base) is not None for base in cls.__mro__[1:])

        if "__table__" in cls.__dict__:
            table_name = cls.__dict__["__table__"].name
        elif "__tablename__" in cls.__dict__:
            table_name = cls.__dict__["__tablename__"]
        elif inherits:
            # single table inheritance, the parent's table is used
            table_name = None
        else:
            table_name = self.naming_strategy.class_to_table_name(cls.__name__)

        self._name_columns(cls)
        metadata = ClassMetadata(cls, table_name, entity_options(cls))
        self.event_manager.dispatch_event(Events.LOAD_CLASS_METADATA, LoadClassMetadataEventArgs(metadata, self))

        if metadata.table_name is not None and "__table__" not in cls.__dict__:
            cls.__tablename__ = metadata.table_name
        self.registry.map_declaratively(cls)

        metadata.mapper = mapper_of(cls)
        metadata.table_name = metadata.mapper.local_table.name
        logger.debug(f"Mapped entity {metadata.qualified_name} to table '{metadata.table_name}'")
        return metadata

    def _name_columns(self, cls: type) -> None:
        for key, value in list(cls.__dict__.items()):
            column = value.column if isinstance(value, MappedColumn) else value
            if isinstance(column, Column) and column.name is None:
                column.name = self.naming_strategy.property_to_column_name(key, cls.__name__)
