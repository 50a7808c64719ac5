"""Translate application database connection configs into SQLAlchemy connection parameters.

A connection config is the mapping found under
``database.connections.<name>``::

    driver: pgsql
    host: 127.0.0.1
    port: 5432
    database: forge
    username: forge
    password: secret
    charset: utf8
    prefix: app_
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from sqlalchemy.engine import URL
from sqlalchemy.pool import StaticPool

from alchemy_provider.exceptions import MissingConnectionKeyError, UnsupportedDriverError

logger = logging.getLogger("alchemy-provider")

MEMORY_DATABASE = ":memory:"


@dataclass
class ConnectionParams:
    """Everything needed to create an engine for one connection."""

    url: URL
    prefix: str | None = None
    engine_options: dict[str, Any] = field(default_factory=dict)


class Mapper(ABC):
    """Map one family of connection drivers."""

    drivers: ClassVar[tuple[str, ...]] = ()

    def is_appropriate_for(self, config: Mapping[str, Any]) -> bool:
        return config.get("driver") in self.drivers

    @abstractmethod
    def map(self, config: Mapping[str, Any]) -> ConnectionParams: ...

    @staticmethod
    def _require(config: Mapping[str, Any], key: str) -> Any:
        value = config.get(key)
        if value is None or value == "":
            raise MissingConnectionKeyError(config.get("driver"), key)
        return value

    @staticmethod
    def _port(config: Mapping[str, Any]) -> int | None:
        port = config.get("port")
        return int(port) if port not in (None, "") else None


class SqlMapper(Mapper):
    """MySQL, PostgreSQL and SQL Server connections."""

    drivers = ("mysql", "pgsql", "sqlsrv")

    dialects: ClassVar[dict[str, str]] = {
        "mysql": "mysql+pymysql",
        "pgsql": "postgresql+psycopg",
        "sqlsrv": "mssql+pyodbc",
    }

    # URL query argument carrying the client charset, per driver
    charset_arguments: ClassVar[dict[str, str]] = {
        "mysql": "charset",
        "pgsql": "client_encoding",
    }

    def map(self, config: Mapping[str, Any]) -> ConnectionParams:
        driver = config["driver"]
        query = {}
        charset = config.get("charset")
        if charset and driver in self.charset_arguments:
            query[self.charset_arguments[driver]] = charset

        url = URL.create(
            self.dialects[driver],
            username=config.get("username"),
            password=config.get("password"),
            host=self._require(config, "host"),
            port=self._port(config),
            database=self._require(config, "database"),
            query=query,
        )
        connect_args = self._connect_args(driver, config)
        return ConnectionParams(
            url=url,
            prefix=config.get("prefix"),
            engine_options={"connect_args": connect_args} if connect_args else {},
        )

    @staticmethod
    def _connect_args(driver: str, config: Mapping[str, Any]) -> dict[str, Any]:
        connect_args = {}
        if driver == "mysql" and config.get("collation"):
            connect_args["collation"] = config["collation"]
        if driver == "pgsql" and config.get("schema"):
            connect_args["options"] = f"-csearch_path={config['schema']}"
        return connect_args


class SqliteMapper(Mapper):
    """SQLite files and in-memory databases."""

    drivers = ("sqlite",)

    def map(self, config: Mapping[str, Any]) -> ConnectionParams:
        database = self._require(config, "database")
        if database == MEMORY_DATABASE:
            # a single shared connection keeps the in-memory database alive across sessions
            return ConnectionParams(
                url=URL.create("sqlite"),
                prefix=config.get("prefix"),
                engine_options={"poolclass": StaticPool, "connect_args": {"check_same_thread": False}},
            )
        return ConnectionParams(url=URL.create("sqlite", database=str(database)), prefix=config.get("prefix"))


class OracleMapper(Mapper):
    """Oracle connections addressed by service name or SID."""

    drivers = ("oracle",)

    def map(self, config: Mapping[str, Any]) -> ConnectionParams:
        service_name = config.get("service_name")
        url = URL.create(
            "oracle+oracledb",
            username=config.get("username"),
            password=config.get("password"),
            host=self._require(config, "host"),
            port=self._port(config),
            database=None if service_name else self._require(config, "database"),
            query={"service_name": service_name} if service_name else {},
        )
        return ConnectionParams(url=url, prefix=config.get("prefix"))


class DriverMapper:
    """Pick the registered mapper that handles a connection's driver."""

    def __init__(self, mappers: list[Mapper] | None = None):
        self._mappers: list[Mapper] = list(mappers or [])

    @property
    def mappers(self) -> list[Mapper]:
        return list(self._mappers)

    def register_mapper(self, mapper: Mapper) -> None:
        self._mappers.append(mapper)

    def map(self, config: Mapping[str, Any]) -> ConnectionParams:
        """Map a connection config with the first mapper that accepts it.

        Raises:
            UnsupportedDriverError: If no registered mapper handles the driver.
        """
        for mapper in self._mappers:
            if mapper.is_appropriate_for(config):
                params = mapper.map(config)
                logger.debug(
                    f"Mapped '{config.get('driver')}' connection with {type(mapper).__name__}: "
                    f"{params.url.render_as_string(hide_password=True)}"
                )
                return params
        raise UnsupportedDriverError(config.get("driver"))
