"""Host application seam: container, configuration and service providers."""

from alchemy_provider.framework.application import Application
from alchemy_provider.framework.auth import AuthManager
from alchemy_provider.framework.config import ConfigRepository
from alchemy_provider.framework.container import Container
from alchemy_provider.framework.hashing import ScryptHasher
from alchemy_provider.framework.provider import ServiceProvider

__all__ = [
    "Application",
    "AuthManager",
    "ConfigRepository",
    "Container",
    "ScryptHasher",
    "ServiceProvider",
]
