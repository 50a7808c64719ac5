"""Interfaces the application expects its services to satisfy."""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Authenticatable(Protocol):
    def get_auth_identifier_name(self) -> str: ...

    def get_auth_identifier(self) -> Any: ...

    def get_auth_password(self) -> str: ...

    def get_remember_token(self) -> str | None: ...

    def set_remember_token(self, value: str | None) -> None: ...

    def get_remember_token_name(self) -> str: ...


@runtime_checkable
class CanResetPassword(Protocol):
    def get_email_for_password_reset(self) -> str: ...


class UserProvider(Protocol):
    def retrieve_by_id(self, identifier: Any) -> Authenticatable | None: ...

    def retrieve_by_token(self, identifier: Any, token: str) -> Authenticatable | None: ...

    def update_remember_token(self, user: Authenticatable, token: str) -> None: ...

    def retrieve_by_credentials(self, credentials: Mapping[str, Any]) -> Authenticatable | None: ...

    def validate_credentials(self, user: Authenticatable, credentials: Mapping[str, Any]) -> bool: ...


class Hasher(Protocol):
    def make(self, value: str) -> str: ...

    def check(self, value: str, hashed_value: str) -> bool: ...

    def needs_rehash(self, hashed_value: str) -> bool: ...


class PresenceVerifier(Protocol):
    def get_count(
        self,
        collection: Any,
        column: str,
        value: Any,
        exclude_id: Any = None,
        id_column: str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> int: ...

    def get_multi_count(
        self, collection: Any, column: str, values: Iterable[Any], extra: Mapping[str, Any] | None = None
    ) -> int: ...


class MigrationRepository(Protocol):
    def get_ran(self) -> list[str]: ...

    def get_last(self) -> list[Any]: ...

    def log(self, file: str, batch: int) -> None: ...

    def delete(self, migration: Any) -> None: ...

    def get_next_batch_number(self) -> int: ...

    def create_repository(self) -> None: ...

    def repository_exists(self) -> bool: ...

    def set_source(self, name: str | None) -> None: ...


class TokenRepository(Protocol):
    def create(self, user: CanResetPassword) -> str: ...

    def exists(self, user: CanResetPassword, token: str) -> bool: ...

    def delete(self, token: str) -> None: ...

    def delete_expired(self) -> int: ...
