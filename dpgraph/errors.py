"""Errors raised by graph database drivers."""

from __future__ import annotations


class GraphError(Exception):
    """Base class for graph database errors."""


class NotFoundError(GraphError, LookupError):
    """The result set from the database held no records."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class MultipleFoundError(GraphError):
    """More than one record was found where exactly one was required."""

    def __init__(self, message: str = "multiple found where should be one") -> None:
        super().__init__(message)


class NotImplementedByDriverError(GraphError, NotImplementedError):
    """The driver does not implement the method that was called."""

    def __init__(self, message: str = "method not implemented by driver") -> None:
        super().__init__(message)


class AttemptsExceededLimitError(GraphError):
    """The number of attempts reached the maximum permitted."""

    def __init__(self, wrapped_error: BaseException) -> None:
        self.wrapped_error = wrapped_error
        super().__init__(
            f"number of attempts to execute statement exceeded: {wrapped_error}"
        )


class NonRetriableError(GraphError):
    """The database returned an error that cannot be retried."""

    def __init__(self, wrapped_error: BaseException) -> None:
        self.wrapped_error = wrapped_error
        super().__init__(f"received a non retriable error from neo4j: {wrapped_error}")