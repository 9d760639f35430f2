"""Shared state and retry handling for the Neo4j graph driver."""

from __future__ import annotations

import logging
import random
import time
from typing import Any, Mapping, Optional

from dpgraph.errors import AttemptsExceededLimitError, NonRetriableError
from dpgraph.neo4jdriver import CheckState

logger = logging.getLogger(__name__)

TRANSIENT_ERROR_PREFIX = "Neo.TransientError"
DEFAULT_MAX_RETRIES = 5
DEFAULT_TIMEOUT = 60
DEFAULT_POOL_SIZE = 30
RETRY_TIME = 0.02


class BoltFailure(Exception):
    """A failure reported by the database, carrying its status code."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


def is_transient_error(error: BaseException) -> bool:
    """Return True if the database reported the error as transient."""
    if not isinstance(error, BoltFailure):
        return False
    return isinstance(error.code, str) and TRANSIENT_ERROR_PREFIX in error.code


def get_sleep_time(attempt: int, retry_time: float) -> float:
    """Seconds to wait before a retry: doubling per attempt, less 1-4 ms of jitter."""
    jitter = random.randint(1, 4) / 1000
    return (2**attempt) * retry_time - jitter


class Neo4jBase:
    """Holds the driver, the query templates and the retry settings."""

    def __init__(
        self,
        driver: Any,
        queries: Mapping[str, str],
        max_retries: int = DEFAULT_MAX_RETRIES,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        self.driver = driver
        self.queries = dict(queries)
        self.max_retries = max_retries or DEFAULT_MAX_RETRIES
        self.timeout = timeout or DEFAULT_TIMEOUT

    def query(self, name: str, *args: Any) -> str:
        """Fill the named query template with ``args``."""
        try:
            template = self.queries[name]
        except KeyError:
            raise KeyError(f"no query named {name!r}") from None
        return template % args

    def check_attempts(self, error: BaseException, instance_id: str, attempt: int) -> None:
        """Wait before a retry, or raise if the error must not be retried."""
        if not is_transient_error(error):
            logger.error(
                "received an error from neo4j that cannot be retried: %s (instance_id=%s)",
                error,
                instance_id,
            )
            raise NonRetriableError(error) from error

        time.sleep(max(get_sleep_time(attempt, RETRY_TIME), 0.0))

        if attempt >= self.max_retries:
            raise AttemptsExceededLimitError(error) from error

    def close(self) -> None:
        """Close the underlying driver."""
        self.driver.close()

    def healthcheck(self) -> str:
        """Check the database and return the service name."""
        return self.driver.healthcheck()

    def checker(self, state: CheckState) -> None:
        """Record the database health in ``state``."""
        self.driver.checker(state)