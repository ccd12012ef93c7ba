[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alchemastry"
version = "0.1.0"
description = "A small top-down tile-based crafting and gathering game"
requires-python = ">=3.10"
keywords = ["game", "tile-based", "crafting", "sandbox", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
alchemastry = "alchemastry.app:main"
alchemastry-build = "alchemastry.builder:main"

[tool.hatch.build.targets.wheel]
packages = ["alchemastry"]

[tool.pytest.ini_options]
addopts = "-ra"
