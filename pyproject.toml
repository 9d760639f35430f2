[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dpgraph"
version = "2.0.0"
description = "Data models, result mappers and a pool-backed Neo4j driver for instances, dimensions and observation rows held in a graph"
requires-python = ">=3.10"
dependencies = []
keywords = ["neo4j", "graph", "database", "cypher", "instance", "dimension"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dpgraph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
