"""Models, mappers, a pool-backed Neo4j driver and instance and dimension operations for a graph database."""

__version__ = "2.0.0"

__all__ = [
    "base",
    "dimension",
    "error_consumer",
    "errors",
    "instance",
    "mapper",
    "models",
    "neo4jdriver",
    "row_reader",
]