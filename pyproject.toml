[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fuqdb"
version = "0.1.0"
description = "A small CSV table database driven by a line-oriented query language"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "csv", "query-language", "interpreter", "repl", "tables"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fuqdb = "fuqdb.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fuqdb"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
