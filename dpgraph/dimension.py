"""Insertion of dimension option nodes."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from dpgraph.mapper import NodeIDMapper
from dpgraph.models import Dimension, validate_dimension
from dpgraph.neo4jdriver import QueryError

logger = logging.getLogger(__name__)

CREATE_DIMENSION_CONSTRAINT = "CreateDimensionConstraint"
CREATE_DIMENSION_TO_INSTANCE_RELATIONSHIP = "CreateDimensionToInstanceRelationship"


def cache_dimension(
    cache: dict[str, str], cache_lock: threading.Lock, dimension_label: str
) -> bool:
    """Add ``dimension_label`` to the cache; return True if it was not there before."""
    with cache_lock:
        if dimension_label in cache:
            return False
        cache[dimension_label] = dimension_label
        return True


class DimensionMixin:
    """Dimension operations; needs ``driver`` and ``query`` from the host class."""

    def insert_dimension(
        self,
        cache: Optional[dict[str, str]],
        cache_lock: Optional[threading.Lock],
        instance_id: str,
        dimension: Optional[Dimension],
    ) -> Dimension:
        """Insert a dimension option node, returning the dimension with its node ID.

        A unique constraint on the dimension is created the first time the
        dimension is seen in ``cache``.
        """
        if not instance_id:
            raise ValueError("instance id is required but was empty")
        if cache is None:
            raise ValueError("no cache map provided to InsertDimension")
        if cache_lock is None:
            raise ValueError("no cache mutex provided to InsertDimension")
        validate_dimension(dimension)

        label = f"_{instance_id}_{dimension.dimension_id}"
        if cache_dimension(cache, cache_lock, label):
            self._create_unique_constraint(instance_id, dimension.dimension_id)

        self._insert_dimension(instance_id, dimension)
        return dimension

    def _create_unique_constraint(self, instance_id: str, dimension_id: str) -> None:
        stmt = self.query(CREATE_DIMENSION_CONSTRAINT, instance_id, dimension_id)
        try:
            self.driver.exec(stmt, None)
        except Exception as exc:
            raise QueryError("neoClient.Exec returned an error", exc) from exc
        logger.info(
            "successfully created unique constraint on dimension (dimension_id=%s)",
            dimension_id,
        )

    def _insert_dimension(self, instance_id: str, dimension: Dimension) -> None:
        params = {"value": dimension.option}
        stmt = self.query(
            CREATE_DIMENSION_TO_INSTANCE_RELATIONSHIP,
            instance_id,
            instance_id,
            dimension.dimension_id,
        )
        mapper = NodeIDMapper()
        try:
            self.driver.read_with_params(stmt, params, mapper, True)
        except Exception as exc:
            raise QueryError("neoClient.ReadWithParams returned an error", exc) from exc
        dimension.node_id = mapper.node_id