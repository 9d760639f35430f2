# dpgraph

Building blocks for reading and writing dataset instances, dimensions and
observation rows in a Neo4j graph: data classes, mappers from query rows to
those classes, a driver that runs queries on connections taken from a pool,
and instance and dimension operations with retry handling.

## Modules

- `dpgraph.models`: data classes for the records kept in the graph
  (`Code`, `CodeList`, `Edition`, `Dataset`, `DatasetEdition`,
  `HierarchyResponse`, `HierarchyElement`, `Observation`, `DimensionOption`,
  `Dimension`, `Instance` and the list wrappers such as `CodeResults`).
  `Dimension.validate()` and `Instance.validate()` raise `ValueError` when a
  required field is empty; `validate_dimension()` and `validate_instance()`
  also raise when given `None`.
- `dpgraph.errors`: `GraphError` and its subclasses `NotFoundError`,
  `MultipleFoundError`, `NotImplementedByDriverError`,
  `AttemptsExceededLimitError` and `NonRetriableError`.
- `dpgraph.mapper`: `Node`, `Relationship` and `Result` for query rows;
  `get_node`, `get_relationship`, `get_string_property`,
  `get_bool_property` and `get_int_property`, which raise `InputNilError` or
  `CastingError`; mapper factories (`code_lists`, `code_list`, `codes`,
  `code`, `editions`, `edition`, `codes_datasets`, `hierarchy`,
  `hierarchy_element`) and the stateful mappers `CountMapper`,
  `NodeIDMapper` and `HierarchyCodelistMapper`.
- `dpgraph.neo4jdriver`: `NeoDriver`, which runs queries on connections from
  a pool (`read`, `read_with_params`, `count`, `exec`, `stream_rows`) and
  reports health (`healthcheck`, `checker`) into a `CheckState`.
- `dpgraph.row_reader`: `BoltRowReader`, which turns streamed rows into CSV
  lines.
- `dpgraph.base`: `Neo4jBase`, holding the driver, named query templates and
  retry settings, and `check_attempts` for retrying transient failures.
- `dpgraph.instance`: `InstanceMixin` with instance operations and
  `check_properties_set`.
- `dpgraph.dimension`: `DimensionMixin.insert_dimension` and
  `cache_dimension`.
- `dpgraph.error_consumer`: `ErrorConsumer`, a background thread that drains
  a queue of errors.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Connecting

`NeoDriver` takes any pool object with `open_pool()` and `close()`.
`open_pool()` returns a connection with `query_neo(query, params)`,
`exec_neo(query, params)` and `close()`; rows returned by `query_neo` have
`next_neo()` (raising `EOFError` at the end), `all()` and `close()`.

```python
from dpgraph.neo4jdriver import NeoDriver, CheckState

driver = NeoDriver(pool)
state = CheckState()
driver.checker(state)
print(state.status, state.message)
```

`read` and `read_with_params` feed every row to a mapper and raise
`NotFoundError` when no rows come back; with `single=True`, a second row
raises `QueryError`. `count` returns the integer in the first column of the
first row.

## Instance and dimension operations

Combine `Neo4jBase` with the mixins and supply the query templates, keyed by
the names defined in `dpgraph.instance` and `dpgraph.dimension`. Templates
are filled with `%` formatting.

```python
import threading
from dpgraph.base import Neo4jBase
from dpgraph.instance import InstanceMixin, CREATE_INSTANCE
from dpgraph.dimension import DimensionMixin
from dpgraph.models import Dimension

class Graph(Neo4jBase, InstanceMixin, DimensionMixin):
    pass

graph = Graph(driver, {CREATE_INSTANCE: "CREATE (i:`_%s_Instance` {header: '%s'})"})
graph.create_instance("instance-1", ["V4_0", "time", "geography"])

cache, lock = {}, threading.Lock()
graph.insert_dimension(cache, lock, "instance-1", Dimension("geography", "area-1"))
```

`insert_dimension` creates the unique constraint for a dimension only the
first time the dimension is seen in `cache`, then stores the new node ID on
the dimension.

## Retries

`Neo4jBase.check_attempts(error, instance_id, attempt)` raises
`NonRetriableError` for any error that is not a `BoltFailure` whose code
contains `Neo.TransientError`. For transient errors it sleeps for
`get_sleep_time(attempt, retry_time)` (doubling per attempt, less a few
milliseconds of jitter) and raises `AttemptsExceededLimitError` once
`attempt` reaches `max_retries` (5 by default).

## Reading streamed rows

```python
with driver.stream_rows(query) as reader:
    for line in reader:
        handle(line)
```

Each line ends with a newline. When no rows come back the reader raises
`NoInstanceFoundError`, and when only one row came back it raises
`NoResultsFoundError`. A row with no data raises `NoDataReturnedError`; a
row whose first value is not a string raises `UnrecognisedTypeError`.

## Consuming errors in the background

```python
import queue
from dpgraph.error_consumer import ErrorConsumer

errors = queue.Queue()
consumer = ErrorConsumer(errors, lambda err: print("graph error:", err))
errors.put(RuntimeError("connection dropped"))
consumer.close(timeout=1.0)
```

`close` waits for the thread to stop and raises `ContextDoneError` if it
does not finish in time; a second call does nothing.
`new_logging_error_consumer(errors)` starts one that logs each error.

## What this package does not do

- It ships no Cypher query text; every template used by the instance and
  dimension operations must be supplied to `Neo4jBase`.
- It does not speak the Bolt protocol or manage connections itself; you
  provide the pool.
- It has no code list, edition or code lookups and no hierarchy reading or
  building operations, though the mappers and models for them are here.
- It reads no configuration from the environment and has no command line.