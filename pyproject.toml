[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "classboard"
version = "0.1.0"
description = "A small JSON API for subjects, assignments and submitted solutions, backed by SQLite."
requires-python = ">=3.10"
keywords = ["assignments", "education", "rest", "api", "sqlite", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: Flask",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Education",
]
dependencies = [
    "flask>=2.2",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
classboard = "classboard.app:main"

[tool.hatch.build.targets.wheel]
packages = ["classboard"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
