[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "klein"
version = "0.5.0"
description = "Building blocks for a terminal IDE: LSP client pieces, a file tree, layout helpers, menus and ANSI stripping"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "editor",
    "ide",
    "terminal",
    "lsp",
    "language-server",
    "json-rpc",
    "file-tree",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors :: Integrated Development Environments (IDE)",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["klein"]

[tool.hatch.build.targets.sdist]
include = [
    "klein",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
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
