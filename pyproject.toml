[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linanalyzer"
version = "0.1.0"
description = "Decode LIN bus traffic from sampled digital signals and generate simulated LIN frames"
requires-python = ">=3.10"
dependencies = []
keywords = ["lin", "lin-bus", "automotive", "protocol-analyzer", "logic-analyzer", "serial", "checksum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
linanalyzer = "linanalyzer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["linanalyzer"]

[tool.hatch.build.targets.sdist]
include = ["linanalyzer", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
