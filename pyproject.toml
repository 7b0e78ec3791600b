[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "w3"
version = "0.1.0"
description = "Ethereum helpers: hex and amount parsing, message and state types, fork state caching, trace decoding and a golden-file JSON-RPC test server"
requires-python = ">=3.10"
keywords = ["ethereum", "json-rpc", "evm", "keccak", "storage-slot", "trace"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["w3"]

[tool.pytest.ini_options]
addopts = "-ra"
