from alchemy_provider.configuration.mappers import (
    ConnectionParams,
    DriverMapper,
    Mapper,
    OracleMapper,
    SqliteMapper,
    SqlMapper,
)
from alchemy_provider.configuration.naming import DefaultNamingStrategy, NamingStrategy, SnakeCaseNamingStrategy

__all__ = [
    "ConnectionParams",
    "DefaultNamingStrategy",
    "DriverMapper",
    "Mapper",
    "NamingStrategy",
    "OracleMapper",
    "SnakeCaseNamingStrategy",
    "SqlMapper",
    "SqliteMapper",
]
