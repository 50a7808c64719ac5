from alchemy_provider.auth.mixins import Authentication, CanResetPassword
from alchemy_provider.auth.passwords import EntityTokenRepository, PasswordReminder
from alchemy_provider.auth.user_provider import EntityUserProvider

__all__ = [
    "Authentication",
    "CanResetPassword",
    "EntityTokenRepository",
    "EntityUserProvider",
    "PasswordReminder",
]
