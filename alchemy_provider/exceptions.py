class BindingResolutionError(Exception):
    """Raised when the container cannot build a requested service."""

    def __init__(self, abstract: str, reason: str):
        super().__init__(f"Unable to resolve '{abstract}': {reason}.")


class UnsupportedDriverError(Exception):
    """Raised when no mapper accepts a database connection config."""

    def __init__(self, driver: str | None):
        super().__init__(f"Driver '{driver}' is not supported. Register a mapper for it on the DriverMapper.")


class MissingConnectionKeyError(Exception):
    """Raised when a database connection config lacks a required key."""

    def __init__(self, driver: str | None, key: str):
        super().__init__(f"Connection config for driver '{driver}' is missing required key '{key}'.")


class ConnectionNotConfiguredError(Exception):
    """Raised when the default database connection has no config."""

    def __init__(self, name: str | None):
        super().__init__(f"Database connection '{name}' is not configured under 'database.connections'.")


class UnknownFilterError(Exception):
    """Raised when a filter name was never added to the ORM configuration."""

    def __init__(self, name: str):
        super().__init__(f"Filter '{name}' does not exist.")


class FilterNotEnabledError(Exception):
    """Raised when a disabled filter is requested from the filter collection."""

    def __init__(self, name: str):
        super().__init__(f"Filter '{name}' is not enabled.")


class EntityNotMappedError(Exception):
    """Raised when a class or collection name does not refer to a mapped entity."""

    def __init__(self, name: str):
        super().__init__(f"'{name}' is not a mapped entity.")


class UnknownFieldError(AttributeError):
    """Raised when repository criteria name a field the entity does not have."""

    def __init__(self, entity_name: str, field: str):
        super().__init__(f"Entity '{entity_name}' has no field '{field}'.")


class SchemaToolError(Exception):
    """Raised when a schema operation fails in the database."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Schema {operation} failed: {reason}")


class UnsupportedAuthDriverError(Exception):
    """Raised when no user provider creator is registered for an auth driver."""

    def __init__(self, driver: str | None):
        super().__init__(f"Authentication user provider '{driver}' is not defined.")


class MissingConfigurationError(Exception):
    """Raised when a required configuration key is not set."""

    def __init__(self, key: str):
        super().__init__(f"Configuration key '{key}' must be set.")
