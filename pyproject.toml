[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "calaos-home"
version = "0.1.0"
description = "Home automation client models: rooms, devices, favourites, event log, weather and local configuration"
requires-python = ">=3.10"
keywords = [
    "home-automation",
    "domotics",
    "calaos",
    "smart-home",
    "weather",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Home Automation",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["calaos_home"]

[tool.hatch.build.targets.sdist]
include = [
    "calaos_home",
    "tests",
    "README.md",
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
