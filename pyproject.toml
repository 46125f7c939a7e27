[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aspartial"
version = "0.0.1"
description = "TypeScript-like 'partial' types: read incomplete JSON values into dataclass-like objects whose fields may all be missing"
requires-python = ">=3.10"
dependencies = []
keywords = ["partial", "json", "deserialization", "dataclasses", "tagged-union"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats :: JSON",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["aspartial"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
