"""Entity manager and the pieces it is configured with."""

from alchemy_provider.orm.configuration import Configuration
from alchemy_provider.orm.entity import Entity, EntityOptions, is_entity
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.events import (
    EventManager,
    Events,
    LoadClassMetadataEventArgs,
    OnFlushEventArgs,
)
from alchemy_provider.orm.filters import SKIP_FILTERS, FilterCollection, SQLFilter, TrashedFilter
from alchemy_provider.orm.metadata import ClassMetadata, ClassMetadataFactory
from alchemy_provider.orm.mixins import SoftDeletes, Timestamps, utcnow
from alchemy_provider.orm.repository import EntityRepository
from alchemy_provider.orm.schema import SchemaTool
from alchemy_provider.orm.sql_logging import DebugStack, SqlLogger

__all__ = [
    "SKIP_FILTERS",
    "ClassMetadata",
    "ClassMetadataFactory",
    "Configuration",
    "DebugStack",
    "Entity",
    "EntityManager",
    "EntityOptions",
    "EntityRepository",
    "EventManager",
    "Events",
    "FilterCollection",
    "LoadClassMetadataEventArgs",
    "OnFlushEventArgs",
    "SQLFilter",
    "SchemaTool",
    "SoftDeletes",
    "SqlLogger",
    "Timestamps",
    "TrashedFilter",
    "is_entity",
    "utcnow",
]
