[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chainkit"
version = "0.1.0"
description = "Address codecs, transaction building, fee estimation and RPC helpers for Solana, Substrate, Terra and Zcash"
requires-python = ">=3.10"
keywords = [
    "blockchain",
    "solana",
    "zcash",
    "substrate",
    "terra",
    "base58",
    "utxo",
    "sighash",
    "json-rpc",
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "cryptography",
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
chainkit-keygen = "chainkit.keygen:main"

[tool.hatch.build.targets.wheel]
packages = ["chainkit"]

[tool.hatch.build.targets.sdist]
include = [
    "chainkit",
    "tests",
]

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
