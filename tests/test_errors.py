import pytest

from dpgraph.errors import (
    AttemptsExceededLimitError,
    GraphError,
    MultipleFoundError,
    NonRetriableError,
    NotFoundError,
    NotImplementedByDriverError,
)


def test_not_found_message():
    err = NotFoundError()
    assert str(err) == "not found"


def test_multiple_found_message():
    assert str(MultipleFoundError()) == "multiple found where should be one"


def test_not_implemented_message_and_hierarchy():
    err = NotImplementedByDriverError()
    assert isinstance(err, NotImplementedError)
    assert str(err) == "method not implemented by driver"


@pytest.mark.parametrize(
    "error_type, message",
    [
        (NotFoundError, "not found"),
        (MultipleFoundError, "multiple found where should be one"),
        (NotImplementedByDriverError, "method not implemented by driver"),
    ],
)
def test_sentinels_are_graph_errors(error_type, message):
    err = error_type()
    assert isinstance(err, GraphError)
    assert str(err) == message


def test_attempts_exceeded_wraps_error():
    inner = RuntimeError("boom")
    err = AttemptsExceededLimitError(inner)
    assert err.wrapped_error is inner
    assert str(err) == "number of attempts to execute statement exceeded: boom"


def test_non_retriable_wraps_error():
    inner = RuntimeError("bad query")
    err = NonRetriableError(inner)
    assert err.wrapped_error is inner
    assert str(err) == "received a non retriable error from neo4j: bad query"


def test_wrapping_errors_are_graph_errors():
    err = NonRetriableError(ValueError("x"))
    assert isinstance(err, GraphError)
    assert str(err) == "received a non retriable error from neo4j: x"