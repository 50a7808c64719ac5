from dataclasses import dataclass
from typing import Any, ClassVar

import sqlalchemy


@dataclass(frozen=True)
class EntityOptions:
    """Per-entity settings declared through class keywords."""

    repository_class: type | str | None = None


class Entity:
    """Base class of entities the ORM maps.

    Subclasses are plain classes holding ``Mapped`` annotations and
    ``mapped_column`` attributes; they are mapped when the metadata factory
    first loads them, which lets listeners adjust table names beforehand.

    Example:
        >>> class User(Entity, repository_class="app.repositories.UserRepository"):
        ...     id: Mapped[int] = mapped_column(primary_key=True)
        ...     email: Mapped[str] = mapped_column(String(255))
    """

    __entity_options__: ClassVar[EntityOptions] = EntityOptions()

    def __init_subclass__(cls, repository_class: type | str | None = None, abstract: bool = False, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        cls.__abstract__ = abstract
        cls.__entity_options__ = EntityOptions(repository_class=repository_class)

    def __init__(self, **kwargs: Any):
        cls = type(self)
        for key, value in kwargs.items():
            if not hasattr(cls, key):
                raise TypeError(f"{key!r} is an invalid keyword argument for {cls.__name__}")  # noqa: TRY003
            setattr(self, key, value)

    def __repr__(self) -> str:
        state = sqlalchemy.inspect(self, raiseerr=False)
        if state is None or state.identity is None:
            return f"<{type(self).__name__} (transient)>"
        identity = ", ".join(str(value) for value in state.identity)
        return f"<{type(self).__name__} {identity}>"


def is_entity(cls: Any) -> bool:
    """True for concrete ``Entity`` subclasses."""
    return (
        isinstance(cls, type)
        and issubclass(cls, Entity)
        and cls is not Entity
        and not cls.__dict__.get("__abstract__", False)
    )


def entity_options(cls: type) -> EntityOptions:
    return getattr(cls, "__entity_options__", None) or EntityOptions()
