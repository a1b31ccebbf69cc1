[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "awiv_adapter"
version = "0.1.0"
description = "Aggregates autonomous-driving status messages into API-level reports and serves operator and velocity API requests."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "autonomous driving",
    "adapter",
    "diagnostics",
    "stop reason",
    "v2x",
    "vehicle status",
]
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
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["awiv_adapter"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
