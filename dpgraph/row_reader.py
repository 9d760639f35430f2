"""Streaming of CSV rows from a graph query result."""

from __future__ import annotations

from typing import Any, Iterator, Optional, Protocol


class Rows(Protocol):
    """Rows of a query result, read one at a time."""

    def next_neo(self) -> tuple[list[Any], Optional[dict[str, Any]]]:
        """Return the next row and its metadata, raising EOFError at the end."""
        ...

    def all(self) -> tuple[list[list[Any]], Optional[dict[str, Any]]]:
        """Return every remaining row and the metadata."""
        ...

    def close(self) -> None:
        """Release the rows."""
        ...


class Connection(Protocol):
    """A database connection taken from a pool."""

    def query_neo(self, query: str, params: Optional[dict[str, Any]]) -> Rows:
        """Run a query that returns rows."""
        ...

    def exec_neo(self, query: str, params: Optional[dict[str, Any]]) -> Any:
        """Run a statement and return its result."""
        ...

    def close(self) -> None:
        """Give the connection back to its pool."""
        ...


class RowReaderError(Exception):
    """Base class for errors raised while reading rows."""


class NoInstanceFoundError(RowReaderError):
    """The query returned no rows at all, so the instance does not exist."""

    def __init__(self, message: str = "no instance found in datastore") -> None:
        super().__init__(message)


class NoResultsFoundError(RowReaderError):
    """The query returned only the header row."""

    def __init__(self, message: str = "no results found in datastore") -> None:
        super().__init__(message)


class NoDataReturnedError(RowReaderError):
    """A row held no data."""

    def __init__(self, message: str = "no data returned in this row") -> None:
        super().__init__(message)


class UnrecognisedTypeError(RowReaderError):
    """A row held a value that is not a CSV string."""

    def __init__(self, message: str = "unrecognised type") -> None:
        super().__init__(message)


class BoltRowReader:
    """Turns query rows into CSV lines; owns the connection until closed."""

    def __init__(self, rows: Rows, connection: Connection) -> None:
        self._rows = rows
        self._connection = connection
        self.rows_read = 0

    def read(self) -> str:
        """Return the next CSV row with a trailing newline.

        Raises EOFError once every row has been read, NoInstanceFoundError if
        there were no rows and NoResultsFoundError if there was only one.
        """
        try:
            data, _meta = self._rows.next_neo()
        except EOFError:
            if self.rows_read == 0:
                raise NoInstanceFoundError() from None
            if self.rows_read == 1:
                raise NoResultsFoundError() from None
            raise

        if not data:
            raise NoDataReturnedError()

        csv_row = data[0]
        if not isinstance(csv_row, str):
            raise UnrecognisedTypeError()

        self.rows_read += 1
        return csv_row + "\n"

    def __iter__(self) -> Iterator[str]:
        while True:
            try:
                yield self.read()
            except EOFError:
                return

    def close(self) -> None:
        """Close the rows and give the connection back to its pool."""
        try:
            self._rows.close()
        finally:
            self._connection.close()

    def __enter__(self) -> "BoltRowReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()