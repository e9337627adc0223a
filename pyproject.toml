[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oskar"
version = "0.1.0"
description = "Student records, class lists, spreadsheet imports, data migration and licence handling for school exam planning"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "school",
    "exam",
    "students",
    "classroom",
    "sqlite",
    "spreadsheet",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Natural Language :: Turkish",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oskar"]

[tool.hatch.build.targets.sdist]
include = ["oskar", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
