"""Hooks receiving every SQL statement an engine executes."""

import logging
import time
from typing import Any

from sqlalchemy import Engine, event

_STARTED_AT = "alchemy_provider_query_started_at"


class SqlLogger:
    """Write executed statements and their duration to a logger.

    Args:
        logger: Logger or logger name.
        level: Level statements are logged at.
    """

    def __init__(self, logger: logging.Logger | str = "alchemy-provider.sql", level: int = logging.DEBUG):
        self.logger = logging.getLogger(logger) if isinstance(logger, str) else logger
        self.level = level

    def attach(self, engine: Engine) -> None:
        event.listen(engine, "before_cursor_execute", self._before_cursor_execute)
        event.listen(engine, "after_cursor_execute", self._after_cursor_execute)
        event.listen(engine, "handle_error", self._handle_error)

    def detach(self, engine: Engine) -> None:
        event.remove(engine, "before_cursor_execute", self._before_cursor_execute)
        event.remove(engine, "after_cursor_execute", self._after_cursor_execute)
        event.remove(engine, "handle_error", self._handle_error)

    def start_query(self, sql: str, params: Any) -> None:
        self.logger.log(self.level, f"{sql} {params!r}")

    def stop_query(self, elapsed: float) -> None:
        self.logger.log(self.level, f"Query took {elapsed * 1000:.2f} ms")

    def _before_cursor_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        conn.info.setdefault(_STARTED_AT, []).append(time.perf_counter())
        self.start_query(statement, parameters)

    def _after_cursor_execute(self, conn, cursor, statement, parameters, context, executemany) -> None:
        started = conn.info[_STARTED_AT].pop()
        self.stop_query(time.perf_counter() - started)

    def _handle_error(self, context) -> None:
        # a failed statement never reaches after_cursor_execute
        connection = context.connection
        if connection is not None and connection.info.get(_STARTED_AT):
            connection.info[_STARTED_AT].pop()


class DebugStack(SqlLogger):
    """Keep executed statements in memory instead of logging them."""

    def __init__(self):
        super().__init__()
        self.enabled = True
        self.queries: list[dict[str, Any]] = []

    def start_query(self, sql: str, params: Any) -> None:
        if self.enabled:
            self.queries.append({"sql": sql, "params": params, "execution_ms": None})

    def stop_query(self, elapsed: float) -> None:
        if self.enabled and self.queries:
            self.queries[-1]["execution_ms"] = elapsed * 1000
