[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taskdag"
version = "0.1.0"
description = "Run asyncio tasks as a directed acyclic graph with conditional edges and a shared context"
requires-python = ">=3.10"
keywords = ["dag", "task graph", "asyncio", "workflow", "pipeline", "conditional edges"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: AsyncIO",
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
    "starlette",
    "uvicorn",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "httpx",
]

[project.scripts]
taskdag-basic-usage = "taskdag.demos.basic_usage:main"
taskdag-simple-api = "taskdag.demos.simple_api:main"
taskdag-simple-parallel = "taskdag.demos.simple_parallel:main"
taskdag-advanced-conditional = "taskdag.demos.advanced_conditional:main"
taskdag-web-service = "taskdag.demos.web_service:main"

[tool.hatch.build.targets.wheel]
packages = ["taskdag"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
