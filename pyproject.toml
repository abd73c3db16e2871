[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lexgen"
version = "0.1.0"
description = "Building blocks for a lexical-analyzer generator: option scanning, usage text, symbol tables, skeleton files, transition-table packing and serialized scanner tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "scanner", "generator", "dfa", "tables", "command-line"]
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
    "Topic :: Software Development :: Code Generators",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lexgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
