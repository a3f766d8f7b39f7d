[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vmr"
version = "0.1.0"
description = "Settings, download preparation and installation helpers for a multi-language SDK version manager"
requires-python = ">=3.11"
keywords = ["version-manager", "sdk", "toolchain", "installer", "environment"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: Utilities",
]
dependencies = [
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
vmr = "vmr.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["vmr"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
