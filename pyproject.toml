[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "claimsdesk"
version = "0.1.0"
description = "A small HTTP service for submitting, looking up and reversing pharmacy claims"
requires-python = ">=3.10"
keywords = ["pharmacy", "claims", "reversal", "npi", "ndc", "http", "api", "flask", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "flask",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
claimsdesk = "claimsdesk.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["claimsdesk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
