[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kvdb"
version = "0.1.0"
description = "A small in-memory key-value database server with a plain-text TCP protocol and an interactive client"
requires-python = ">=3.10"
keywords = ["key-value", "database", "in-memory", "tcp", "server", "client"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
kvdb-server = "kvdb.server:main"
kvdb-client = "kvdb.client:main"

[tool.hatch.build.targets.wheel]
packages = ["kvdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
