[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gitdig"
version = "1.1.0"
description = "Download whole GitHub repositories or single directories over the contents API, without cloning"
requires-python = ">=3.10"
keywords = ["github", "download", "repository", "directory", "zip"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
gitdig = "gitdig.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gitdig"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
