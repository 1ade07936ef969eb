[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "promcommon"
version = "0.1.0"
description = "Shared building blocks for monitoring tools: label sets, fingerprints, timestamps, durations, query values, alerts, silences, logger setup and WSGI routing helpers."
requires-python = ">=3.10"
keywords = ["monitoring", "metrics", "labels", "fingerprint", "alerts", "duration", "wsgi", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: Internet :: WWW/HTTP :: WSGI",
]
dependencies = [
    "pyyaml",
    "werkzeug",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["promcommon"]

[tool.hatch.build.targets.sdist]
include = ["promcommon", "tests"]

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
