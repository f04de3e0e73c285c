[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flowline"
version = "0.1.0"
description = "Thread-based data flow disciplines: joining, uniting and rate limiting of items passed through channels, plus priority dividers and their inspection"
requires-python = ">=3.10"
dependencies = []
keywords = ["channel", "pipeline", "rate-limit", "batching", "priority", "threading"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flowline"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
