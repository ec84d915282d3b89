[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "frostsig"
version = "0.1.0"
description = "FROST threshold signatures producing standard Ed25519 signatures, over the ristretto255 group"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "frost",
    "threshold-signature",
    "ed25519",
    "ristretto255",
    "eddsa",
    "multi-party",
    "distributed-key-generation",
]
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
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
frostsig = "frostsig.cli:main"
frostsig-keygen = "frostsig.cli:keygen_main"
frostsig-signer = "frostsig.cli:signer_main"

[tool.hatch.build.targets.wheel]
packages = ["frostsig"]

[tool.hatch.build.targets.sdist]
include = [
    "frostsig",
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
