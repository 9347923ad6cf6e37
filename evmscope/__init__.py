"""Disassemble EVM bytecode, trace it in a small virtual machine and render operations as expressions."""

__version__ = "0.1.0"