"""A connection-pool backed driver for running queries against Neo4j."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from dpgraph.errors import NotFoundError
from dpgraph.mapper import Result, ResultMapper
from dpgraph.row_reader import BoltRowReader, Connection

SERVICE_NAME = "neo4j"
MSG_HEALTHY = "Neo4j is healthy"
_PING_STMT = "MATCH (i) RETURN i LIMIT 1"


class ConnectionPool(Protocol):
    """A pool of database connections."""

    def open_pool(self) -> Connection:
        """Take a connection from the pool."""
        ...

    def close(self) -> None:
        """Close the pool."""
        ...


class HealthStatus(str, enum.Enum):
    """Health of a checked service."""

    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


@dataclass
class CheckState:
    """The latest result of a health check."""

    name: str = SERVICE_NAME
    status: Optional[HealthStatus] = None
    message: str = ""
    status_code: int = 0
    last_checked: Optional[datetime] = None

    def update(self, status: HealthStatus, message: str, status_code: int) -> None:
        """Record a new check outcome."""
        self.status = status
        self.message = message
        self.status_code = status_code
        self.last_checked = datetime.now(timezone.utc)


class QueryError(Exception):
    """A query failed; the message says where, the cause says why."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class NeoDriver:
    """Runs queries on connections taken from a pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def close(self) -> None:
        """Close the connection pool."""
        self.pool.close()

    def read(self, query: str, mapper: Optional[ResultMapper], single: bool) -> None:
        """Run ``query`` and feed every row to ``mapper``."""
        self._read(query, None, mapper, single)

    def read_with_params(
        self,
        query: str,
        params: Optional[dict[str, Any]],
        mapper: Optional[ResultMapper],
        single: bool,
    ) -> None:
        """Run ``query`` with ``params`` and feed every row to ``mapper``."""
        self._read(query, params, mapper, single)

    def _read(
        self,
        query: str,
        params: Optional[dict[str, Any]],
        mapper: Optional[ResultMapper],
        single: bool,
    ) -> None:
        conn = self.pool.open_pool()
        try:
            try:
                rows = conn.query_neo(query, params)
            except Exception as exc:
                raise QueryError("error executing neo4j query", exc) from exc
            try:
                index = 0
                while True:
                    try:
                        data, meta = rows.next_neo()
                    except EOFError:
                        break
                    except Exception as exc:
                        raise QueryError(
                            "extractResults: rows.NextNeo() return unexpected error", exc
                        ) from exc

                    if single and index > 0:
                        raise QueryError("non unique results")

                    if mapper is not None:
                        try:
                            mapper(Result(data=data, meta=meta, index=index))
                        except Exception as exc:
                            raise QueryError("mapResult returned an error", exc) from exc
                    index += 1
            finally:
                rows.close()
        finally:
            conn.close()

        if index == 0:
            raise NotFoundError()

    def stream_rows(self, query: str) -> BoltRowReader:
        """Return a reader over the rows of ``query``; the caller must close it."""
        conn = self.pool.open_pool()
        try:
            rows = conn.query_neo(query, None)
        except Exception:
            conn.close()
            raise
        return BoltRowReader(rows, conn)

    def count(self, query: str) -> int:
        """Run ``query`` and return the integer in its first column of the first row."""
        conn = self.pool.open_pool()
        try:
            try:
                rows = conn.query_neo(query, None)
            except Exception as exc:
                raise QueryError("error executing neo4j query", exc) from exc
            try:
                data, _meta = rows.all()
            finally:
                rows.close()
        finally:
            conn.close()

        try:
            value = data[0][0]
        except (IndexError, TypeError):
            raise ValueError("Could not get result from DB") from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("Could not get result from DB")
        return value

    def exec(self, query: str, params: Optional[dict[str, Any]]) -> Any:
        """Run a statement and return its result."""
        conn = self.pool.open_pool()
        try:
            return conn.exec_neo(query, params)
        finally:
            conn.close()

    def healthcheck(self) -> str:
        """Ping the database and return the service name; raises if unhealthy."""
        conn = self.pool.open_pool()
        try:
            rows = conn.query_neo(_PING_STMT, None)
            rows.close()
        finally:
            conn.close()
        return SERVICE_NAME

    def checker(self, state: CheckState) -> None:
        """Check the database and record the outcome in ``state``."""
        try:
            self.healthcheck()
        except Exception as exc:
            state.update(HealthStatus.CRITICAL, str(exc), 0)
            return
        state.update(HealthStatus.OK, MSG_HEALTHY, 0)