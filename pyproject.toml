[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nibilang"
version = "0.1.0"
description = "Scoped environments, error reports, REPL input handling and a self-contained terminal line editor for the Nibi lisp-like language."
requires-python = ">=3.10"
dependencies = []
keywords = ["nibi", "lisp", "repl", "line-editing", "readline", "terminal", "s-expressions"]
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
    "Topic :: Software Development :: Interpreters",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nibilang"]

[tool.hatch.build.targets.sdist]
include = ["nibilang", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
