"""ORM lifecycle events and the manager dispatching them to listeners.

A listener is any object with a method named after the event it handles::

    class Audit:
        def on_flush(self, args: OnFlushEventArgs) -> None: ...

    event_manager.add_event_listener(Events.ON_FLUSH, Audit())
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy.orm import Session

if TYPE_CHECKING:
    from alchemy_provider.orm.entity_manager import EntityManager
    from alchemy_provider.orm.metadata import ClassMetadata, ClassMetadataFactory

logger = logging.getLogger("alchemy-provider")


class Events:
    # before an entity class is mapped; listeners may still rename its table
    LOAD_CLASS_METADATA = "load_class_metadata"
    # before pending changes are written
    ON_FLUSH = "on_flush"


@dataclass
class LoadClassMetadataEventArgs:
    class_metadata: "ClassMetadata"
    metadata_factory: "ClassMetadataFactory"


@dataclass
class OnFlushEventArgs:
    entity_manager: "EntityManager"
    session: Session

    @property
    def scheduled_insertions(self) -> list[Any]:
        return list(self.session.new)

    @property
    def scheduled_updates(self) -> list[Any]:
        return list(self.session.dirty)

    @property
    def scheduled_deletions(self) -> list[Any]:
        return list(self.session.deleted)


class EventSubscriber(Protocol):
    def get_subscribed_events(self) -> list[str]: ...


class EventManager:
    def __init__(self):
        self._listeners: dict[str, list[Any]] = {}

    def add_event_listener(self, events: str | Iterable[str], listener: Any) -> None:
        """Attach ``listener`` to one or more events.

        Raises:
            TypeError: If the listener has no method named after an event.
        """
        for event in [events] if isinstance(events, str) else events:
            if not callable(getattr(listener, event, None)):
                raise TypeError(f"Listener {type(listener).__name__} has no '{event}' method")  # noqa: TRY003
            listeners = self._listeners.setdefault(event, [])
            if listener not in listeners:
                listeners.append(listener)
                logger.debug(f"Added {type(listener).__name__} listener for '{event}'")

    def remove_event_listener(self, events: str | Iterable[str], listener: Any) -> None:
        for event in [events] if isinstance(events, str) else events:
            listeners = self._listeners.get(event, [])
            if listener in listeners:
                listeners.remove(listener)

    def add_event_subscriber(self, subscriber: EventSubscriber) -> None:
        self.add_event_listener(subscriber.get_subscribed_events(), subscriber)

    def dispatch_event(self, event: str, args: Any = None) -> None:
        for listener in list(self._listeners.get(event, [])):
            getattr(listener, event)(args)

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def get_listeners(self, event: str) -> list[Any]:
        return list(self._listeners.get(event, []))
