[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dotkit"
version = "0.1.0"
description = "Building blocks for a dotfile manager: shell quoting, git status parsing, prompts, password-manager lookups and upgrade helpers"
requires-python = ">=3.10"
dependencies = [
    "semver",
]
keywords = [
    "dotfiles",
    "git",
    "password-manager",
    "shell",
    "templates",
    "configuration",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
dotkit-lint-whitespace = "dotkit.lintwhitespace:main"
dotkit-docsgen = "dotkit.docsgen:main"

[tool.hatch.build.targets.wheel]
packages = ["dotkit"]

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
