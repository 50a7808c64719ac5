"""Password reset tokens stored as entities."""

import hashlib
import hmac
import logging
import secrets
from collections.abc import Callable
from datetime import datetime, timedelta

from sqlalchemy import DateTime, Integer, String, delete
from sqlalchemy.orm import Mapped, mapped_column

from alchemy_provider.framework.contracts import CanResetPassword
from alchemy_provider.orm.entity import Entity
from alchemy_provider.orm.entity_manager import EntityManager
from alchemy_provider.orm.mixins import utcnow

logger = logging.getLogger("alchemy-provider")


class PasswordReminder(Entity):
    __tablename__ = "password_reminders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), index=True)
    token: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    def is_expired(self, expires: int) -> bool:
        return self.created_at + timedelta(minutes=expires) < utcnow()


class EntityTokenRepository:
    """Create and check password reset tokens.

    Args:
        entity_manager_factory: Returns the entity manager; called on each use.
        hash_key: Secret the tokens are signed with.
        expires: Minutes a token stays valid.
    """

    def __init__(self, entity_manager_factory: Callable[[], EntityManager], hash_key: str, expires: int = 60):
        self._entity_manager_factory = entity_manager_factory
        self.hash_key = hash_key
        self.expires = expires

    def _entity_manager(self) -> EntityManager:
        em = self._entity_manager_factory()
        em.get_class_metadata(PasswordReminder)
        return em

    def create(self, user: CanResetPassword) -> str:
        """Replace the user's reminders with a fresh one and return its token."""
        email = user.get_email_for_password_reset()
        token = self.create_new_token()
        em = self._entity_manager()
        with em.transaction():
            em.execute(delete(PasswordReminder).where(PasswordReminder.email == email))
            em.persist(PasswordReminder(email=email, token=token, created_at=utcnow()))
        logger.debug("Created password reset token")
        return token

    def exists(self, user: CanResetPassword, token: str) -> bool:
        reminder = (
            self._entity_manager()
            .get_repository(PasswordReminder)
            .find_one_by({"email": user.get_email_for_password_reset(), "token": token})
        )
        return reminder is not None and not reminder.is_expired(self.expires)

    def delete(self, token: str) -> None:
        em = self._entity_manager()
        with em.transaction():
            em.execute(delete(PasswordReminder).where(PasswordReminder.token == token))

    def delete_expired(self) -> int:
        """Remove expired reminders and return how many were removed."""
        expired_at = utcnow() - timedelta(minutes=self.expires)
        em = self._entity_manager()
        with em.transaction():
            result = em.execute(delete(PasswordReminder).where(PasswordReminder.created_at < expired_at))
        return result.rowcount

    def create_new_token(self) -> str:
        return hmac.new(self.hash_key.encode(), secrets.token_bytes(20), hashlib.sha256).hexdigest()
