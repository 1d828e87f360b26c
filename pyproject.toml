[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "l2state"
version = "0.1.0"
description = "Cached layer-2 contract state, L1 gas usage estimation and transaction fee calculation"
requires-python = ">=3.10"
dependencies = []
keywords = ["starknet", "state", "cache", "gas", "fee", "rollup"]
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

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["l2state"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
