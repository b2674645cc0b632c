[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "carwash"
version = "0.1.0"
description = "Telegram bot for booking car wash time slots, backed by SQLite"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "booking", "car wash", "scheduling", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "requests>=2.28",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
carwash = "carwash.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["carwash"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
