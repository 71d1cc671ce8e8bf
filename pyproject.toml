[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ormkit"
version = "0.1.0"
description = "Small helpers for building SQL query fragments and inspecting model values"
requires-python = ">=3.10"
dependencies = []
keywords = ["orm", "sql", "database", "query", "utilities"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ormkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
