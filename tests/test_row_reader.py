import pytest

from dpgraph.row_reader import (
    BoltRowReader,
    NoDataReturnedError,
    NoInstanceFoundError,
    NoResultsFoundError,
    UnrecognisedTypeError,
)


class FakeRows:
    def __init__(self, rows, close_error=None):
        self._rows = list(rows)
        self.closed = 0
        self._close_error = close_error

    def next_neo(self):
        if not self._rows:
            raise EOFError()
        return self._rows.pop(0), None

    def close(self):
        self.closed += 1
        if self._close_error:
            raise self._close_error


class RepeatingRows(FakeRows):
    def __init__(self, row):
        super().__init__([])
        self._row = row

    def next_neo(self):
        return self._row, None


class FakeConn:
    def __init__(self):
        self.closed = 0

    def close(self):
        self.closed += 1


def test_read_returns_csv_row():
    reader = BoltRowReader(RepeatingRows(["the,csv,row", "1,2,3"]), FakeConn())
    assert reader.read() == "the,csv,row\n"


def test_read_eof_with_no_rows_is_no_instance_found():
    reader = BoltRowReader(FakeRows([]), FakeConn())
    with pytest.raises(NoInstanceFoundError):
        reader.read()


def test_read_empty_row_is_no_data_returned():
    reader = BoltRowReader(RepeatingRows([]), FakeConn())
    with pytest.raises(NoDataReturnedError):
        reader.read()


def test_read_non_string_is_unrecognised_type():
    reader = BoltRowReader(RepeatingRows([666, 666]), FakeConn())
    with pytest.raises(UnrecognisedTypeError):
        reader.read()


def test_read_eof_after_header_only_is_no_results_found():
    reader = BoltRowReader(FakeRows([["header"]]), FakeConn())
    assert reader.read() == "header\n"
    with pytest.raises(NoResultsFoundError):
        reader.read()


def test_read_eof_after_several_rows_raises_eof():
    reader = BoltRowReader(FakeRows([["header"], ["a,b"]]), FakeConn())
    reader.read()
    reader.read()
    with pytest.raises(EOFError):
        reader.read()


def test_iteration_yields_all_rows():
    reader = BoltRowReader(FakeRows([["h1,h2"], ["1,2"], ["3,4"]]), FakeConn())
    assert list(reader) == ["h1,h2\n", "1,2\n", "3,4\n"]
    assert reader.rows_read == 3


def test_close_closes_rows_and_connection():
    rows, conn = FakeRows([]), FakeConn()
    BoltRowReader(rows, conn).close()
    assert (rows.closed, conn.closed) == (1, 1)


def test_close_releases_connection_even_if_rows_fail():
    rows, conn = FakeRows([], close_error=RuntimeError("boom")), FakeConn()
    with pytest.raises(RuntimeError):
        BoltRowReader(rows, conn).close()
    assert conn.closed == 1


def test_context_manager_closes():
    rows, conn = FakeRows([["x"], ["y"]]), FakeConn()
    with BoltRowReader(rows, conn) as reader:
        assert reader.read() == "x\n"
    assert (rows.closed, conn.closed) == (1, 1)