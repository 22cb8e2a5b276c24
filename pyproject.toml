[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "capir"
version = "0.18.1"
description = "High-level intermediate representation, optimisation passes and name resolution for a capability-based language compiler"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "hir",
    "intermediate-representation",
    "constant-folding",
    "dead-code-elimination",
    "name-resolution",
    "diagnostics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["capir"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
