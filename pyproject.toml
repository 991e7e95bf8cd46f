[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wsdb"
version = "0.1.0"
description = "Storage core of a small relational database: typed values, pages, disk files, LRU and LRU-K replacers and a buffer pool."
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "buffer pool", "lru", "lru-k", "storage engine", "pages"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wsdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
