"""Naming strategies deriving table and column names from entity classes."""

from abc import ABC, abstractmethod

import inflection


def short_name(class_name: str) -> str:
    """Strip the module path from a qualified class name."""
    return class_name.rsplit(".", 1)[-1]


def snake_case(value: str) -> str:
    """``UserProfile`` -> ``user_profile``, ``createdAt`` -> ``created_at``, ``HTTPRequest`` -> ``http_request``."""
    return inflection.underscore(value)


class NamingStrategy(ABC):
    """Decide the database names of everything an entity maps."""

    @abstractmethod
    def class_to_table_name(self, class_name: str) -> str: ...

    @abstractmethod
    def property_to_column_name(self, property_name: str, class_name: str | None = None) -> str: ...

    def reference_column_name(self) -> str:
        return "id"

    @abstractmethod
    def join_column_name(self, property_name: str) -> str: ...

    @abstractmethod
    def join_table_name(self, source_entity: str, target_entity: str, property_name: str | None = None) -> str: ...

    @abstractmethod
    def join_key_column_name(self, entity_name: str, referenced_column_name: str | None = None) -> str: ...


class DefaultNamingStrategy(NamingStrategy):
    """Use class and attribute names as written."""

    def class_to_table_name(self, class_name: str) -> str:
        return short_name(class_name)

    def property_to_column_name(self, property_name: str, class_name: str | None = None) -> str:
        return property_name

    def join_column_name(self, property_name: str) -> str:
        return f"{property_name}_{self.reference_column_name()}"

    def join_table_name(self, source_entity: str, target_entity: str, property_name: str | None = None) -> str:
        return f"{self.class_to_table_name(source_entity)}_{self.class_to_table_name(target_entity)}".lower()

    def join_key_column_name(self, entity_name: str, referenced_column_name: str | None = None) -> str:
        referenced = referenced_column_name or self.reference_column_name()
        return f"{self.class_to_table_name(entity_name)}_{referenced}".lower()


class SnakeCaseNamingStrategy(NamingStrategy):
    """Plural snake-case tables and snake-case columns.

    ``UserProfile`` maps to ``user_profiles``, ``createdAt`` to ``created_at``,
    a ``author`` relation to ``author_id`` and the many-to-many join table of
    ``Role`` and ``User`` to ``role_user``.
    """

    def class_to_table_name(self, class_name: str) -> str:
        return inflection.pluralize(snake_case(short_name(class_name)))

    def property_to_column_name(self, property_name: str, class_name: str | None = None) -> str:
        return snake_case(property_name)

    def join_column_name(self, property_name: str) -> str:
        return f"{inflection.singularize(snake_case(property_name))}_{self.reference_column_name()}"

    def join_table_name(self, source_entity: str, target_entity: str, property_name: str | None = None) -> str:
        names = sorted(snake_case(short_name(name)) for name in (source_entity, target_entity))
        return "_".join(names)

    def join_key_column_name(self, entity_name: str, referenced_column_name: str | None = None) -> str:
        referenced = referenced_column_name or self.reference_column_name()
        return f"{snake_case(short_name(entity_name))}_{referenced}"
