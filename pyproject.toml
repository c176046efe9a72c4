[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "importmap"
version = "0.1.0"
description = "Build browser import maps from CDN packages, with local caching of assets"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["importmap", "esm", "cdn", "cdnjs", "jsdelivr", "unpkg", "skypack", "esm.sh", "assets"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
importmap = "importmap.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["importmap"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
