from collections.abc import Generator
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from entity_factories import make_blog_entities

from alchemy_provider.configuration import SnakeCaseNamingStrategy, SqliteMapper
from alchemy_provider.framework.application import Application
from alchemy_provider.framework.config import ConfigRepository
from alchemy_provider.listeners import SoftDeletableListener
from alchemy_provider.orm import (
    Configuration,
    EntityManager,
    EventManager,
    Events,
    SchemaTool,
    TrashedFilter,
)
from alchemy_provider.provider import OrmServiceProvider

MEMORY_CONNECTION = {"driver": "sqlite", "database": ":memory:"}


@pytest.fixture
def entity_manager() -> Generator[EntityManager, Any, None]:
    """In-memory SQLite entity manager configured like the provider configures it."""
    configuration = Configuration.create([], debug=True)
    configuration.naming_strategy = SnakeCaseNamingStrategy()
    configuration.add_filter("trashed", TrashedFilter)
    event_manager = EventManager()
    event_manager.add_event_listener(Events.ON_FLUSH, SoftDeletableListener())

    em = EntityManager.create(SqliteMapper().map(MEMORY_CONNECTION), configuration, event_manager)
    em.filters.enable("trashed")

    yield em

    em.close()
    em.engine.dispose()


@pytest.fixture
def blog(entity_manager: EntityManager) -> SimpleNamespace:
    """Blog entities mapped on ``entity_manager`` with their tables created."""
    entities = make_blog_entities()
    SchemaTool(entity_manager).create_schema([entities.User, entities.Post, entities.Tag])
    return entities


@pytest.fixture
def app_config() -> dict[str, Any]:
    return {
        "app": {"debug": False, "key": "test-application-key"},
        "database": {
            "default": "sqlite",
            "connections": {"sqlite": {**MEMORY_CONNECTION, "prefix": ""}},
        },
        "auth": {"driver": "orm", "model": None, "password": {"expire": 60}},
    }


@pytest.fixture
def app(tmp_path: Path, app_config: dict[str, Any]) -> Generator[Application, Any, None]:
    """Booted application with the ORM provider registered."""
    application = Application(base_path=tmp_path, config=ConfigRepository(app_config))
    application.register(OrmServiceProvider)
    application.boot()

    yield application

    if application.resolved(EntityManager):
        em = application.make(EntityManager)
        em.close()
        em.engine.dispose()
