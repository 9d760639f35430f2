"""Mappers that turn query result rows into model objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from dpgraph.errors import NotFoundError
from dpgraph.models import (
    Code,
    CodeList,
    CodeListResults,
    CodeResults,
    Edition,
    Editions,
    HierarchyElement,
    HierarchyResponse,
)

_CODE_LIST_LABEL_MARKER = "_code_list_"


@dataclass
class Node:
    """A graph node returned by a query."""

    node_identity: int = 0
    labels: list[str] = field(default_factory=list)
    properties: Optional[dict[str, Any]] = field(default_factory=dict)


@dataclass
class Relationship:
    """A graph relationship returned by a query."""

    rel_identity: int = 0
    start_node_identity: int = 0
    end_node_identity: int = 0
    type: str = ""
    properties: Optional[dict[str, Any]] = field(default_factory=dict)


@dataclass
class Result:
    """One row of a query response with its metadata and position."""

    data: list[Any] = field(default_factory=list)
    meta: Optional[dict[str, Any]] = None
    index: int = 0


ResultMapper = Callable[[Result], None]


class InputNilError(ValueError):
    """A value was expected but was missing."""

    def __init__(self, message: str = "expected input value but was nil") -> None:
        super().__init__(message)


class CastingError(TypeError):
    """A value was not of the type requested."""

    def __init__(self, expected: str, actual: Any) -> None:
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(
            f'failed to cast value to requested type, expected "{expected}" '
            f'but was type "{self.actual}"'
        )


def _item(data: list[Any], index: int) -> Any:
    return data[index] if index < len(data) else None


def get_node(value: Any) -> Node:
    """Return ``value`` as a Node, raising if it is missing or of another type."""
    if value is None:
        raise InputNilError()
    if not isinstance(value, Node):
        raise CastingError("Node", value)
    return value


def get_relationship(value: Any) -> Relationship:
    """Return ``value`` as a Relationship, raising if it is missing or of another type."""
    if value is None:
        raise InputNilError()
    if not isinstance(value, Relationship):
        raise CastingError("Relationship", value)
    return value


def get_string_property(key: str, props: Optional[dict[str, Any]]) -> str:
    """Return a string property, or an empty string if the key is absent."""
    if props is None:
        raise InputNilError()
    if key not in props:
        return ""
    value = props[key]
    if not isinstance(value, str):
        raise CastingError("str", value)
    return value


def get_bool_property(key: str, props: Optional[dict[str, Any]]) -> bool:
    """Return a boolean property, or False if the key is absent."""
    if props is None:
        raise InputNilError()
    if key not in props:
        return False
    value = props[key]
    if not isinstance(value, bool):
        raise CastingError("bool", value)
    return value


def get_int_property(key: str, props: Optional[dict[str, Any]]) -> int:
    """Return an integer property, or 0 if the key is absent."""
    if not props or key not in props:
        return 0
    value = props[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise CastingError("int", value)
    return value


class CountMapper:
    """Extracts a single integer count from a result; the value is kept in ``count``."""

    def __init__(self) -> None:
        self.count = 0

    def __call__(self, result: Result) -> None:
        if len(result.data) != 1:
            raise ValueError(
                "get count error: expecting single result value but "
                f"{len(result.data)} returned"
            )
        value = result.data[0]
        if isinstance(value, bool) or not isinstance(value, int):
            raise CastingError("int", value)
        self.count = value


class NodeIDMapper:
    """Extracts a node ID from a result; the value is kept in ``node_id``."""

    def __init__(self) -> None:
        self.node_id = ""

    def __call__(self, result: Result) -> None:
        value = _item(result.data, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError("unexpected error while casting node id to int64")
        self.node_id = str(value)


class HierarchyCodelistMapper:
    """Extracts the code list ID of a hierarchy node into ``code_list_id``."""

    def __init__(self) -> None:
        self.code_list_id = ""

    def __call__(self, result: Result) -> None:
        node = get_node(_item(result.data, 0))
        try:
            code_list_id = get_string_property("code_list", node.properties)
        except (InputNilError, CastingError) as exc:
            raise ValueError("code_list property not found") from exc
        self.code_list_id = code_list_id


def code_lists(results: CodeListResults) -> ResultMapper:
    """Return a mapper that appends a code list for each row of labels."""

    def mapper(result: Result) -> None:
        code_list_id = ""
        for label in result.data[0]:
            if _CODE_LIST_LABEL_MARKER in label:
                code_list_id = label.replace(_CODE_LIST_LABEL_MARKER, "")
                break
        results.items.append(CodeList(id=code_list_id))

    return mapper


def code_list(target: CodeList, code_list_id: str) -> ResultMapper:
    """Return a mapper that sets the code list ID, raising if the row is empty."""

    def mapper(result: Result) -> None:
        if not result.data:
            raise NotFoundError()
        target.id = code_list_id

    return mapper


def _code(result: Result) -> Code:
    if not result.data:
        raise NotFoundError()
    node = get_node(result.data[0])
    code_value = get_string_property("value", node.properties)
    rel = get_relationship(_item(result.data, 1))
    label = get_string_property("label", rel.properties)
    return Code(id=str(node.node_identity), code=code_value, label=label)


def codes(results: CodeResults, code_list_id: str, edition: str) -> ResultMapper:
    """Return a mapper that appends a code for each row."""

    def mapper(result: Result) -> None:
        results.items.append(_code(result))

    return mapper


def code(target: Code, code_list_id: str, edition: str) -> ResultMapper:
    """Return a mapper that fills ``target`` from a single row."""

    def mapper(result: Result) -> None:
        found = _code(result)
        target.id, target.code, target.label = found.id, found.code, found.label

    return mapper


def _edition(result: Result) -> Edition:
    node = get_node(_item(result.data, 0))
    edition_id = get_string_property("edition", node.properties)
    label = get_string_property("label", node.properties)
    return Edition(id=edition_id, label=label)


def editions(results: Editions) -> ResultMapper:
    """Return a mapper that appends an edition for each row."""

    def mapper(result: Result) -> None:
        results.items.append(_edition(result))

    return mapper


def edition(target: Edition) -> ResultMapper:
    """Return a mapper that fills ``target`` from a single row."""

    def mapper(result: Result) -> None:
        found = _edition(result)
        target.id, target.label = found.id, found.label

    return mapper


@dataclass
class DatasetData:
    """How a code appears in one dataset: its dimension label and versions per edition."""

    dimension_label: str = ""
    editions: dict[str, list[int]] = field(default_factory=dict)


def codes_datasets(datasets: dict[str, DatasetData]) -> ResultMapper:
    """Return a mapper that collects dataset, edition and version per row."""

    def mapper(result: Result) -> None:
        node = get_node(_item(result.data, 0))
        relationship = get_relationship(_item(result.data, 1))
        dataset_id = get_string_property("dataset_id", node.properties)
        dataset_edition = get_string_property("edition", node.properties)
        version = get_int_property("version", node.properties)
        dimension_label = get_string_property("label", relationship.properties)

        dataset = datasets.get(dataset_id)
        if dataset is None:
            dataset = DatasetData(dimension_label=dimension_label)
        dataset.editions.setdefault(dataset_edition, []).append(version)
        datasets[dataset_id] = dataset

    return mapper


def _create_element(node: Node) -> HierarchyElement:
    try:
        element_id = get_string_property("code", node.properties)
    except (InputNilError, CastingError) as exc:
        raise ValueError("code property not found") from exc
    try:
        label = get_string_property("label", node.properties)
    except (InputNilError, CastingError) as exc:
        raise ValueError("label property not found") from exc
    try:
        has_data = get_bool_property("hasData", node.properties)
    except (InputNilError, CastingError) as exc:
        raise ValueError("hasData property not found") from exc
    try:
        children = get_int_property("numberOfChildren", node.properties)
    except CastingError as exc:
        raise ValueError("numberOfChildren property not found") from exc
    return HierarchyElement(
        id=element_id, label=label, has_data=has_data, no_of_children=children
    )


def hierarchy(response: HierarchyResponse) -> ResultMapper:
    """Return a mapper that fills a hierarchy response from a node row."""

    def mapper(result: Result) -> None:
        element = _create_element(get_node(_item(result.data, 0)))
        response.id = element.id
        response.label = element.label
        response.has_data = element.has_data
        response.no_of_children = element.no_of_children

    return mapper


def hierarchy_element(elements: list[HierarchyElement]) -> ResultMapper:
    """Return a mapper that appends a hierarchy element for each node row."""

    def mapper(result: Result) -> None:
        elements.append(_create_element(get_node(_item(result.data, 0))))

    return mapper