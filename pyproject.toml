[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cavsdk"
version = "2.0.0"
description = "Client library for the Cloud Avenue API: consoles, endpoint registry, sub-clients and asynchronous jobs"
requires-python = ">=3.10"
keywords = ["cloudavenue", "vcd", "cloud director", "api", "sdk", "cerberus"]
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
]
dependencies = [
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["cavsdk"]

[tool.hatch.build.targets.sdist]
include = ["cavsdk", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP", "SIM"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
