[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "evmscope"
version = "0.1.0"
description = "Disassemble EVM bytecode, trace it through a small virtual machine and render operations as Solidity-like expressions"
requires-python = ">=3.10"
keywords = ["ethereum", "evm", "bytecode", "disassembler", "solidity", "virtual-machine"]
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
    "Topic :: Software Development :: Disassemblers",
]
dependencies = [
    "pycryptodome",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
evmscope-disassemble = "evmscope.disassemble:main"

[tool.hatch.build.targets.wheel]
packages = ["evmscope"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
