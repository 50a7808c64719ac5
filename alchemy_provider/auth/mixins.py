"""Mixins that make entities usable by the authentication layer."""

import sqlalchemy
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column


class Authentication:
    """Password and remember-token columns plus the authenticatable methods."""

    password: Mapped[str] = mapped_column("password", String(255))
    remember_token: Mapped[str | None] = mapped_column("remember_token", String(100), nullable=True, default=None)

    def get_auth_identifier_name(self) -> str:
        mapper = sqlalchemy.inspect(type(self))
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def get_auth_identifier(self):
        return getattr(self, self.get_auth_identifier_name())

    def get_auth_password(self) -> str:
        return self.password

    def get_remember_token(self) -> str | None:
        return getattr(self, self.get_remember_token_name())

    def set_remember_token(self, value: str | None) -> None:
        setattr(self, self.get_remember_token_name(), value)

    def get_remember_token_name(self) -> str:
        return "remember_token"


class CanResetPassword:
    def get_email_for_password_reset(self) -> str:
        return self.email
