"""Wire SQLAlchemy into an application container."""

from alchemy_provider.provider import OrmServiceProvider

__all__ = ["OrmServiceProvider"]
