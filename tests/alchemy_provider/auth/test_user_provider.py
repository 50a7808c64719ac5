"""Tests for alchemy_provider.auth.user_provider and mixins modules."""

from types import SimpleNamespace

import pytest

from alchemy_provider.auth import EntityUserProvider
from alchemy_provider.framework.contracts import Authenticatable, CanResetPassword
from alchemy_provider.framework.hashing import ScryptHasher
from alchemy_provider.orm import EntityManager


@pytest.fixture
def hasher() -> ScryptHasher:
    return ScryptHasher(n=2**8)


@pytest.fixture
def provider(hasher: ScryptHasher, entity_manager: EntityManager, blog: SimpleNamespace) -> EntityUserProvider:
    return EntityUserProvider(hasher, entity_manager, blog.User)


@pytest.fixture
def user(entity_manager: EntityManager, blog: SimpleNamespace, hasher: ScryptHasher):
    user = blog.User(email="ada@example.com", password=hasher.make("secret"), remember_token="remember-me")
    entity_manager.persist(user)
    entity_manager.flush()
    return user


class TestAuthenticationMixin:
    """Tests for the authenticatable methods of user entities."""

    def test_user_satisfies_the_contracts(self, user) -> None:
        assert isinstance(user, Authenticatable)
        assert isinstance(user, CanResetPassword)

    def test_identifier(self, user) -> None:
        assert user.get_auth_identifier_name() == "id"
        assert user.get_auth_identifier() == user.id

    def test_password_and_remember_token(self, user) -> None:
        assert user.get_auth_password().startswith("scrypt$")
        assert user.get_remember_token_name() == "remember_token"
        assert user.get_remember_token() == "remember-me"

        user.set_remember_token("other")

        assert user.remember_token == "other"

    def test_email_for_password_reset(self, user) -> None:
        assert user.get_email_for_password_reset() == "ada@example.com"


class TestEntityUserProvider:
    """Tests for EntityUserProvider."""

    def test_retrieve_by_id(self, provider: EntityUserProvider, user) -> None:
        assert provider.retrieve_by_id(user.id) is user
        assert provider.retrieve_by_id(404) is None

    def test_retrieve_by_token(self, provider: EntityUserProvider, user) -> None:
        assert provider.retrieve_by_token(user.id, "remember-me") is user
        assert provider.retrieve_by_token(user.id, "stale") is None

    def test_update_remember_token(self, provider: EntityUserProvider, entity_manager: EntityManager, user) -> None:
        provider.update_remember_token(user, "fresh")
        entity_manager.clear()

        assert provider.retrieve_by_id(user.id).remember_token == "fresh"

    def test_retrieve_by_credentials_ignores_password(self, provider: EntityUserProvider, user) -> None:
        assert provider.retrieve_by_credentials({"email": "ada@example.com", "password": "wrong"}) is user
        assert provider.retrieve_by_credentials({"email": "bob@example.com", "password": "secret"}) is None

    def test_retrieve_by_credentials_without_criteria(self, provider: EntityUserProvider, user) -> None:
        assert provider.retrieve_by_credentials({"password": "secret", "password_confirmation": "secret"}) is None

    def test_validate_credentials(self, provider: EntityUserProvider, user) -> None:
        assert provider.validate_credentials(user, {"email": "ada@example.com", "password": "secret"})
        assert not provider.validate_credentials(user, {"email": "ada@example.com", "password": "nope"})
        assert not provider.validate_credentials(user, {"email": "ada@example.com"})

    def test_soft_deleted_users_are_not_found(
        self, provider: EntityUserProvider, entity_manager: EntityManager, user
    ) -> None:
        entity_manager.remove(user)
        entity_manager.flush()
        entity_manager.clear()

        assert provider.retrieve_by_credentials({"email": "ada@example.com"}) is None

    def test_entity_class_by_dotted_path(self, hasher: ScryptHasher, entity_manager: EntityManager) -> None:
        provider = EntityUserProvider(hasher, entity_manager, "alchemy_provider.auth.passwords.PasswordReminder")

        assert provider.entity_class.__name__ == "PasswordReminder"
