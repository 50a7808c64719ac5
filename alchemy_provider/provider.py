"""Service provider wiring the ORM into the application container."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from hydra.utils import get_class, instantiate

from alchemy_provider.auth.passwords import EntityTokenRepository
from alchemy_provider.auth.user_provider import EntityUserProvider
from alchemy_provider.cache import ArrayProvider, CacheManager, MemcacheProvider, NullProvider, RedisProvider
from alchemy_provider.configuration import (
    ConnectionParams,
    DriverMapper,
    NamingStrategy,
    OracleMapper,
    SnakeCaseNamingStrategy,
    SqliteMapper,
    SqlMapper,
)
from alchemy_provider.exceptions import ConnectionNotConfiguredError, MissingConfigurationError
from alchemy_provider.framework.application import Application
from alchemy_provider.framework.auth import AuthManager
from alchemy_provider.framework.config import ConfigRepository
from alchemy_provider.framework.contracts import Hasher, MigrationRepository, PresenceVerifier, TokenRepository
from alchemy_provider.framework.provider import ServiceProvider
from alchemy_provider.listeners import SoftDeletableListener, TablePrefix
from alchemy_provider.migrations.repository import EntityMigrationRepository
from alchemy_provider.orm import (
    ClassMetadataFactory,
    Configuration,
    EntityManager,
    EntityRepository,
    EventManager,
    Events,
    SchemaTool,
    SqlLogger,
    TrashedFilter,
)
from alchemy_provider.validation.presence import EntityPresenceVerifier

logger = logging.getLogger("alchemy-provider")

PACKAGE_CONFIG = Path(__file__).parent / "config" / "orm.yaml"

# entities every application gets: the migration log and password reset tokens
BUILTIN_ENTITY_MODULES = ("alchemy_provider.migrations.entity", "alchemy_provider.auth.passwords")


class OrmServiceProvider(ServiceProvider):
    """Register the entity manager and the services built on it.

    Reads ``database.default`` / ``database.connections`` for the connection,
    ``orm`` for ORM settings, ``app.debug``, ``app.key`` and ``auth.*``.
    """

    def boot(self) -> None:
        self.publishes({PACKAGE_CONFIG: self.app.config_path("orm.yaml")}, group="config")
        self.extend_auth_manager()
        self.extend_migrator()

    def register(self) -> None:
        self.register_configuration_mapper()
        self.register_cache_manager()
        self.register_entity_manager()
        self.register_class_metadata_factory()
        self.register_validation_verifier()
        self.register_password_tokens()

        from alchemy_provider.cli.commands.mapping import mapping_app
        from alchemy_provider.cli.commands.schema import schema_app

        self.commands(schema_app, mapping_app)
        self.merge_config_from(PACKAGE_CONFIG, "orm")

    def register_configuration_mapper(self) -> None:
        """Share one driver mapper so mappers registered on it are used for every connection."""
        self.app.singleton(DriverMapper, lambda app: DriverMapper([SqlMapper(), SqliteMapper(), OracleMapper()]))

    def register_cache_manager(self) -> None:
        def make_cache_manager(app: Application) -> CacheManager:
            manager = CacheManager(app.config.get("orm.cache", {}))
            for provider in (ArrayProvider(), RedisProvider(), MemcacheProvider(), NullProvider()):
                manager.add(provider)
            return manager

        self.app.singleton(CacheManager, make_cache_manager)

    def register_entity_manager(self) -> None:
        if not self.app.bound(NamingStrategy):
            self.app.bind(NamingStrategy, SnakeCaseNamingStrategy)
        self.app.singleton(EntityManager, self.make_entity_manager)
        self.app.alias(EntityManager, "orm")

    def make_entity_manager(self, app: Application) -> EntityManager:
        config = app.config.get("orm", {}) or {}

        cache = app.make(CacheManager).get_cache(config.get("cache_provider"))
        configuration = Configuration.create(
            [*config.get("metadata", []), *BUILTIN_ENTITY_MODULES],
            debug=app.running_in_debug(),
            cache=cache,
        )
        configuration.add_filter("trashed", TrashedFilter)
        configuration.default_repository_class = self._repository_class(config.get("repository"))
        configuration.sql_logger = self._sql_logger(config.get("logger"))
        configuration.naming_strategy = app.make(NamingStrategy)
        configuration.engine_options = dict(config.get("engine") or {})

        connection = self.map_connection_config(app.config)
        event_manager = EventManager()
        if connection.prefix:
            event_manager.add_event_listener(Events.LOAD_CLASS_METADATA, TablePrefix(connection.prefix))
        event_manager.add_event_listener(Events.ON_FLUSH, SoftDeletableListener())

        entity_manager = EntityManager.create(connection, configuration, event_manager)
        entity_manager.filters.enable("trashed")
        logger.debug(f"Entity manager ready with {len(entity_manager.metadata_factory.get_all_metadata())} entities")
        return entity_manager

    def register_class_metadata_factory(self) -> None:
        self.app.singleton(ClassMetadataFactory, lambda app: app.make(EntityManager).metadata_factory)
        self.app.bind(SchemaTool)

    def register_validation_verifier(self) -> None:
        self.app.singleton("validation.presence", lambda app: EntityPresenceVerifier(lambda: app.make(EntityManager)))
        self.app.alias("validation.presence", PresenceVerifier)

    def register_password_tokens(self) -> None:
        def make_token_repository(app: Application) -> EntityTokenRepository:
            key = app.config.get("app.key")
            if not key:
                raise MissingConfigurationError("app.key")
            expires = int(app.config.get("auth.password.expire", 60))
            return EntityTokenRepository(lambda: app.make(EntityManager), key, expires)

        self.app.singleton("auth.password.tokens", make_token_repository)
        self.app.alias("auth.password.tokens", TokenRepository)

    def extend_auth_manager(self) -> None:
        def create_user_provider(app: Application) -> EntityUserProvider:
            model = app.config.get("auth.model")
            if not model:
                raise MissingConfigurationError("auth.model")
            return EntityUserProvider(app.make(Hasher), app.make(EntityManager), model)

        self.app.make(AuthManager).extend("orm", create_user_provider)

    def extend_migrator(self) -> None:
        def make_migration_repository(app: Application) -> EntityMigrationRepository:
            return EntityMigrationRepository(
                lambda: app.make(EntityManager),
                lambda: app.make(SchemaTool),
                lambda: app.make(ClassMetadataFactory),
            )

        self.app.singleton("migration.repository", make_migration_repository)
        self.app.bind(MigrationRepository, "migration.repository")

    def map_connection_config(self, config: ConfigRepository) -> ConnectionParams:
        """Map the default database connection to SQLAlchemy connection parameters.

        Raises:
            ConnectionNotConfiguredError: If ``database.connections.<database.default>`` is missing.
        """
        name = config.get("database.default")
        connection = config.get(f"database.connections.{name}") if name else None
        if not connection:
            raise ConnectionNotConfiguredError(name)
        return self.app.make(DriverMapper).map(connection)

    def provides(self) -> list[Any]:
        return [CacheManager, EntityManager, "orm", ClassMetadataFactory, DriverMapper, AuthManager]

    @staticmethod
    def _repository_class(value: type | str | None) -> type[EntityRepository]:
        if value is None:
            return EntityRepository
        return get_class(value) if isinstance(value, str) else value

    @staticmethod
    def _sql_logger(value: Any) -> SqlLogger | None:
        if not value:
            return None
        if isinstance(value, SqlLogger):
            return value
        if isinstance(value, Mapping):
            return instantiate(value)
        return SqlLogger(value)
