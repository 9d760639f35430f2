"""Data models for code lists, datasets, dimensions, hierarchies and observations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class Code:
    """A single code of a code list edition."""

    id: str = ""
    code: str = ""
    label: str = ""


@dataclass
class CodeResults:
    """A list of codes."""

    items: list[Code] = field(default_factory=list)


@dataclass
class CodeList:
    """A code list, identified by its ID."""

    id: str = ""


@dataclass
class CodeListResults:
    """A list of code lists."""

    items: list[CodeList] = field(default_factory=list)


@dataclass
class DatasetEdition:
    """An edition of a dataset that uses a code."""

    id: str = ""
    code_list_id: str = ""
    latest_version: int = 0


@dataclass
class Dataset:
    """A dataset and the editions in which a code appears."""

    id: str = ""
    dimension_label: str = ""
    editions: list[DatasetEdition] = field(default_factory=list)


@dataclass
class Datasets:
    """A list of datasets."""

    items: list[Dataset] = field(default_factory=list)


@dataclass
class Edition:
    """A single code list edition."""

    id: str = ""
    label: str = ""


@dataclass
class Editions:
    """A list of code list editions."""

    items: list[Edition] = field(default_factory=list)


@dataclass
class HierarchyElement:
    """An item within a list held by a hierarchy response."""

    id: str = ""
    label: str = ""
    no_of_children: int = 0
    order: Optional[int] = None
    has_data: bool = False


@dataclass
class HierarchyResponse:
    """A node of a hierarchy with its children and breadcrumbs."""

    id: str = ""
    label: str = ""
    children: list[HierarchyElement] = field(default_factory=list)
    no_of_children: int = 0
    order: Optional[int] = None
    has_data: bool = False
    breadcrumbs: list[HierarchyElement] = field(default_factory=list)


@dataclass
class DimensionOption:
    """A single dimension option of an observation."""

    dimension_name: str = ""
    name: str = ""


@dataclass
class Observation:
    """A single observation row and the dimension options it relates to."""

    row: str = ""
    row_index: int = 0
    instance_id: str = ""
    dimension_options: list[DimensionOption] = field(default_factory=list)


@dataclass
class Dimension:
    """A dimension option belonging to an instance."""

    dimension_id: str = ""
    option: str = ""
    node_id: str = ""

    def validate(self) -> None:
        """Raise ValueError if the dimension ID or option is missing."""
        if not self.dimension_id and not self.option:
            raise ValueError(
                "dimension invalid: both dimension.dimension_id and dimension.value "
                "are required but were both empty"
            )
        if not self.dimension_id:
            raise ValueError("dimension id is required but was empty")
        if not self.option:
            raise ValueError("dimension value is required but was empty")


@dataclass
class Instance:
    """An instance with its CSV header and dimensions."""

    instance_id: str = ""
    csv_header: list[str] = field(default_factory=list)
    dimensions: list[Any] = field(default_factory=list)

    def validate(self) -> None:
        """Raise ValueError if the instance ID is empty."""
        if not self.instance_id:
            raise ValueError("instance id is required but was empty")


def validate_dimension(dimension: Optional[Dimension]) -> None:
    """Validate a dimension that may be missing altogether."""
    if dimension is None:
        raise ValueError("dimension is required but was nil")
    dimension.validate()


def validate_instance(instance: Optional[Instance]) -> None:
    """Validate an instance that may be missing altogether."""
    if instance is None:
        raise ValueError("instance is required but was nil")
    instance.validate()