"""Creation, update and lookup of instance nodes."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from dpgraph.neo4jdriver import QueryError

logger = logging.getLogger(__name__)

CREATE_INSTANCE_OBSERVATION_CONSTRAINT = "CreateInstanceObservationConstraint"
CREATE_INSTANCE = "CreateInstance"
ADD_INSTANCE_DIMENSIONS = "AddInstanceDimensions"
CREATE_INSTANCE_TO_CODE_RELATIONSHIP = "CreateInstanceToCodeRelationship"
COUNT_INSTANCE = "CountInstance"
COUNT_OBSERVATIONS = "CountObservations"
ADD_VERSION_DETAILS_TO_INSTANCE = "AddVersionDetailsToInstance"
SET_INSTANCE_IS_PUBLISHED = "SetInstanceIsPublished"

_MISSING_INSTANCE_ID = "instance id is required but was empty"


def check_properties_set(result: Any, expected: int) -> None:
    """Raise ValueError unless ``result`` reports exactly ``expected`` properties set."""
    stats = result.metadata().get("stats")
    if not isinstance(stats, dict):
        raise ValueError("error getting query result stats")
    if "properties-set" not in stats:
        raise ValueError("error verifying query results")
    value = stats["properties-set"]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("error verifying query results")
    if value != expected:
        raise ValueError(
            f"unexpected rows affected expected {expected} but was {value}"
        )


class InstanceMixin:
    """Instance operations; needs ``driver`` and ``query`` from the host class."""

    def create_instance_constraint(self, instance_id: str) -> None:
        """Create a constraint on observations inserted for this instance."""
        if not instance_id:
            raise ValueError(_MISSING_INSTANCE_ID)
        stmt = self.query(CREATE_INSTANCE_OBSERVATION_CONSTRAINT, instance_id)
        try:
            self.driver.exec(stmt, None)
        except Exception as exc:
            raise QueryError(
                "neo4j.Exec returned an error when creating observation constraint", exc
            ) from exc
        logger.info(
            "created observation constraint (instance_id=%s, statement=%s)",
            instance_id,
            stmt,
        )

    def create_instance(self, instance_id: str, csv_headers: Iterable[str]) -> None:
        """Create an instance node holding the CSV header."""
        if not instance_id:
            raise ValueError(_MISSING_INSTANCE_ID)
        stmt = self.query(CREATE_INSTANCE, instance_id, ",".join(csv_headers))
        try:
            self.driver.exec(stmt, None)
        except Exception as exc:
            raise QueryError("neo4j.Exec returned an error", exc) from exc
        logger.info(
            "create instance success (instance_id=%s, statement=%s)", instance_id, stmt
        )

    def add_dimensions(self, instance_id: str, dimensions: Sequence[Any]) -> None:
        """Add the list of dimensions to the instance node."""
        if not instance_id:
            raise ValueError(_MISSING_INSTANCE_ID)
        stmt = self.query(ADD_INSTANCE_DIMENSIONS, instance_id)
        params = {"dimensions_list": dimensions}
        try:
            self.driver.exec(stmt, params)
        except Exception as exc:
            raise QueryError("neo4j.Exec returned an error", exc) from exc
        logger.info(
            "add instance dimensions success (instance_id=%s, statement=%s, dimensions=%s)",
            instance_id,
            stmt,
            dimensions,
        )

    def create_code_relationship(
        self, instance_id: str, code_list_id: str, code: str
    ) -> None:
        """Link the instance to a code of the given code list."""
        if not instance_id:
            raise ValueError(_MISSING_INSTANCE_ID)
        if not code:
            raise ValueError("code is required but was empty")

        stmt = self.query(CREATE_INSTANCE_TO_CODE_RELATIONSHIP, instance_id, code_list_id)
        params = {"code": code}
        try:
            result = self.driver.exec(stmt, params)
        except Exception as exc:
            raise QueryError("neo4j.Exec returned an error", exc) from exc

        try:
            rows_affected = result.rows_affected()
        except Exception as exc:
            raise QueryError("result.RowsAffected() returned an error", exc) from exc

        if rows_affected != 1:
            raise ValueError(
                f"unexpected number of rows affected. expected 1 but was {rows_affected}"
            )
        logger.info(
            "create code relationship success (instance_id=%s, code=%s, statement=%s)",
            instance_id,
            code,
            stmt,
        )

    def instance_exists(self, instance_id: str) -> bool:
        """Return True if an instance with this ID exists."""
        try:
            count = self.driver.count(self.query(COUNT_INSTANCE, instance_id))
        except Exception as exc:
            raise QueryError("neo4j.Count returned an error", exc) from exc
        return count >= 1

    def count_inserted_observations(self, instance_id: str) -> int:
        """Return the number of observations inserted for the instance."""
        return self.driver.count(self.query(COUNT_OBSERVATIONS, instance_id))

    def add_version_details_to_instance(
        self, instance_id: str, dataset_id: str, edition: str, version: int
    ) -> None:
        """Record the dataset, edition and version the instance is known by."""
        stmt = self.query(ADD_VERSION_DETAILS_TO_INSTANCE, instance_id)
        params = {"dataset_id": dataset_id, "edition": edition, "version": version}
        expected = len(params)
        try:
            result = self.driver.exec(stmt, params)
        except Exception as exc:
            raise QueryError(
                "neoClient AddVersionDetailsToInstance: error executing neo4j update statement",
                exc,
            ) from exc
        try:
            check_properties_set(result, expected)
        except Exception as exc:
            raise QueryError(
                "neoClient AddVersionDetailsToInstance: invalid results", exc
            ) from exc
        logger.info(
            "neoClient AddVersionDetailsToInstance: update successful "
            "(instance_id=%s, dataset_id=%s, edition=%s, version=%s)",
            instance_id,
            dataset_id,
            edition,
            version,
        )

    def set_instance_is_published(self, instance_id: str) -> None:
        """Flag the instance node as published."""
        logger.info(
            "neoClient SetInstanceIsPublished: attempting to set is_published "
            "property on instance node (instance_id=%s)",
            instance_id,
        )
        stmt = self.query(SET_INSTANCE_IS_PUBLISHED, instance_id)
        try:
            result = self.driver.exec(stmt, None)
        except Exception as exc:
            raise QueryError(
                "neoClient SetInstanceIsPublished: error executing neo4j update statement",
                exc,
            ) from exc
        try:
            check_properties_set(result, 1)
        except Exception as exc:
            raise QueryError(
                "neoClient SetInstanceIsPublished: invalid results", exc
            ) from exc
        logger.info(
            "neoClient SetInstanceIsPublished: update successful (instance_id=%s)",
            instance_id,
        )