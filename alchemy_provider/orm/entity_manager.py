"""Entity manager: the single entry point to persistence for application code."""

import hashlib
import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from hydra.utils import get_class
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.orm import ORMExecuteState, Session, scoped_session, sessionmaker
from typing_extensions import Self

from alchemy_provider.configuration.mappers import ConnectionParams
from alchemy_provider.orm.configuration import Configuration
from alchemy_provider.orm.events import EventManager, Events, OnFlushEventArgs
from alchemy_provider.orm.filters import SKIP_FILTERS, FilterCollection
from alchemy_provider.orm.metadata import ClassMetadata, ClassMetadataFactory
from alchemy_provider.orm.repository import EntityRepository

logger = logging.getLogger("alchemy-provider")

T = TypeVar("T")
R = TypeVar("R")

# session.info key counting nested transaction() blocks
_TRANSACTION_DEPTH = "alchemy_provider_transaction_depth"


class EntityManager:
    """Coordinate sessions, mapping metadata, filters and events over one engine.

    Each thread works with its own session from a ``scoped_session``.
    ``flush()`` writes and commits pending changes unless it runs inside
    :meth:`transaction`, in which case the enclosing block commits.

    Args:
        engine: Engine to connect with.
        configuration: ORM settings.
        event_manager: Listeners notified of metadata loading and flushes.
    """

    def __init__(self, engine: Engine, configuration: Configuration, event_manager: EventManager | None = None):
        self.engine = engine
        self.configuration = configuration
        self.event_manager = event_manager or EventManager()
        self.metadata_factory = ClassMetadataFactory(configuration.naming_strategy, self.event_manager)
        self.filters = FilterCollection(self)
        self._repositories: dict[type, EntityRepository] = {}

        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._sessions = scoped_session(self._session_factory)
        event.listen(self._session_factory, "do_orm_execute", self._apply_filters)
        event.listen(self._session_factory, "before_flush", self._dispatch_on_flush)

        if configuration.sql_logger is not None:
            configuration.sql_logger.attach(engine)

        self.metadata_factory.load_modules(configuration.entity_modules)

    @classmethod
    def create(
        cls,
        connection: ConnectionParams | URL | str,
        configuration: Configuration,
        event_manager: EventManager | None = None,
    ) -> Self:
        """Create the engine for a connection and an entity manager on top of it."""
        if isinstance(connection, ConnectionParams):
            url = connection.url
            options = {**connection.engine_options, **configuration.engine_options}
        else:
            url = connection
            options = dict(configuration.engine_options)
        return cls(create_engine(url, **options), configuration, event_manager)

    @property
    def session(self) -> Session:
        """Session of the current thread."""
        return self._sessions()

    def get_class_metadata(self, entity_class: type) -> ClassMetadata:
        return self.metadata_factory.get_metadata_for(entity_class)

    def get_repository(self, entity_class: type[T]) -> EntityRepository[T]:
        """Return the repository of an entity class, built once per manager."""
        repository = self._repositories.get(entity_class)
        if repository is None:
            metadata = self.get_class_metadata(entity_class)
            repository_class = metadata.options.repository_class or self.configuration.default_repository_class
            if isinstance(repository_class, str):
                repository_class = get_class(repository_class)
            repository = repository_class(self, metadata)
            self._repositories[entity_class] = repository
        return repository

    def find(self, entity_class: type[T], identifier: Any) -> T | None:
        self.get_class_metadata(entity_class)
        return self.session.get(entity_class, identifier)

    def persist(self, entity: Any) -> None:
        self.get_class_metadata(type(entity))
        self.session.add(entity)

    def remove(self, entity: Any) -> None:
        session = self.session
        if entity in session.new:
            session.expunge(entity)
        else:
            session.delete(entity)

    def flush(self) -> None:
        session = self.session
        if session.info.get(_TRANSACTION_DEPTH):
            session.flush()
            return
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise

    def refresh(self, entity: Any) -> None:
        self.session.refresh(entity)

    def detach(self, entity: Any) -> None:
        self.session.expunge(entity)

    def merge(self, entity: T) -> T:
        return self.session.merge(entity)

    def contains(self, entity: Any) -> bool:
        return entity in self.session

    def clear(self) -> None:
        self.session.expunge_all()

    def execute(self, statement: Any, params: Mapping[str, Any] | None = None) -> Any:
        return self.session.execute(statement, params)

    @contextmanager
    def transaction(self) -> Iterator[Self]:
        """Group work into one commit; rolls back if the block raises.

        Blocks nest; only the outermost one commits.
        """
        session = self.session
        depth = session.info.get(_TRANSACTION_DEPTH, 0)
        session.info[_TRANSACTION_DEPTH] = depth + 1
        try:
            yield self
        except BaseException:
            session.info[_TRANSACTION_DEPTH] = depth
            if depth == 0:
                session.rollback()
            raise
        session.info[_TRANSACTION_DEPTH] = depth
        if depth == 0:
            try:
                session.commit()
            except Exception:
                session.rollback()
                raise

    def transactional(self, func: Callable[[Self], R]) -> R:
        with self.transaction():
            return func(self)

    def cached_result(
        self,
        statement: Any,
        ttl: int | None = None,
        key: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Run a column query through the result cache.

        Args:
            statement: SELECT to run.
            ttl: Seconds the rows stay cached. None keeps them until evicted.
            key: Cache key. Derived from the compiled statement and its parameters by default.
            params: Bound parameter values.

        Returns:
            Result rows as dictionaries.
        """
        cache = self.configuration.result_cache
        if key is None:
            compiled = statement.compile(self.engine)
            fingerprint = f"{compiled}|{sorted({**compiled.params, **(params or {})}.items())!r}"
            key = "result:" + hashlib.sha256(fingerprint.encode()).hexdigest()
        return cache.remember(key, ttl, lambda: [dict(row) for row in self.execute(statement, params).mappings()])

    def close(self) -> None:
        """Discard the current thread's session."""
        self._sessions.remove()

    def _apply_filters(self, execute_state: ORMExecuteState) -> None:
        if not execute_state.is_select or execute_state.is_column_load or execute_state.is_relationship_load:
            return
        skip = execute_state.execution_options.get(SKIP_FILTERS, ())
        if skip is True:
            return
        if isinstance(skip, str):
            skip = (skip,)
        criteria = self.filters.loader_criteria(skip=skip or ())
        if criteria:
            execute_state.statement = execute_state.statement.options(*criteria)

    def _dispatch_on_flush(self, session: Session, flush_context: Any, instances: Any) -> None:
        self.event_manager.dispatch_event(Events.ON_FLUSH, OnFlushEventArgs(self, session))
