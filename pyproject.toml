[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "coroweave"
version = "0.1.0"
description = "Lazy awaitable tasks, synchronous waiting, concurrent joins and a thread-pool scheduler for Python coroutines"
requires-python = ">=3.10"
dependencies = []
keywords = ["coroutines", "async", "task", "thread-pool", "when_all", "concurrency"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["coroweave"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
