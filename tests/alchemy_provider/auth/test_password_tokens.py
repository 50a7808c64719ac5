"""Tests for alchemy_provider.auth.passwords module."""

from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy import update

from alchemy_provider.auth import EntityTokenRepository, PasswordReminder
from alchemy_provider.orm import EntityManager, SchemaTool, utcnow


@pytest.fixture
def tokens(entity_manager: EntityManager) -> EntityTokenRepository:
    SchemaTool(entity_manager).create_schema([PasswordReminder])
    return EntityTokenRepository(lambda: entity_manager, "app-key", expires=60)


def reminders(entity_manager: EntityManager) -> list[PasswordReminder]:
    return entity_manager.get_repository(PasswordReminder).find_all()


ADA = SimpleNamespace(get_email_for_password_reset=lambda: "ada@example.com")
BOB = SimpleNamespace(get_email_for_password_reset=lambda: "bob@example.com")


def test_create_stores_a_reminder(tokens: EntityTokenRepository, entity_manager: EntityManager) -> None:
    token = tokens.create(ADA)

    [reminder] = reminders(entity_manager)
    assert len(token) == 64
    assert reminder.email == "ada@example.com"
    assert reminder.token == token


def test_create_replaces_previous_tokens(tokens: EntityTokenRepository, entity_manager: EntityManager) -> None:
    first = tokens.create(ADA)
    second = tokens.create(ADA)
    tokens.create(BOB)

    assert first != second
    assert not tokens.exists(ADA, first)
    assert tokens.exists(ADA, second)
    assert len(reminders(entity_manager)) == 2


def test_exists_checks_the_owner(tokens: EntityTokenRepository) -> None:
    token = tokens.create(ADA)

    assert not tokens.exists(BOB, token)


def test_expired_tokens(tokens: EntityTokenRepository, entity_manager: EntityManager) -> None:
    token = tokens.create(ADA)
    tokens.create(BOB)
    with entity_manager.transaction():
        entity_manager.execute(
            update(PasswordReminder)
            .where(PasswordReminder.email == "ada@example.com")
            .values(created_at=utcnow() - timedelta(minutes=61))
        )
    entity_manager.clear()

    assert not tokens.exists(ADA, token)
    assert tokens.delete_expired() == 1
    assert [r.email for r in reminders(entity_manager)] == ["bob@example.com"]


def test_delete(tokens: EntityTokenRepository, entity_manager: EntityManager) -> None:
    token = tokens.create(ADA)

    tokens.delete(token)

    assert reminders(entity_manager) == []


def test_reminder_expiry() -> None:
    reminder = PasswordReminder(email="a", token="t", created_at=utcnow() - timedelta(minutes=30))

    assert not reminder.is_expired(60)
    assert reminder.is_expired(10)
