[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nftstake"
version = "0.1.0"
description = "In-memory model of an NFT staking contract with score-weighted reward distribution, plus a demo NFT escrow"
requires-python = ">=3.10"
dependencies = []
keywords = ["nft", "staking", "rewards", "escrow", "simulation"]
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
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nftstake"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
