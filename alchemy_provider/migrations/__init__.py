from alchemy_provider.migrations.entity import Migration
from alchemy_provider.migrations.repository import EntityMigrationRepository

__all__ = ["EntityMigrationRepository", "Migration"]
