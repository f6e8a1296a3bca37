[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vcverifier"
version = "0.1.0"
description = "Building blocks of a verifiable-credential verifier: configuration, service repository client, trusted issuers registry client and caching helpers."
requires-python = ">=3.10"
keywords = ["verifiable-credentials", "ssi", "oidc", "trusted-issuers-registry", "did", "gaia-x"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
    "Topic :: Internet :: WWW/HTTP",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["vcverifier"]

[tool.hatch.build.targets.sdist]
include = ["vcverifier", "tests", "pyproject.toml"]

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
