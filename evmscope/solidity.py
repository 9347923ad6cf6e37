"""Rendering of wrapped operation trees as Solidity-like expressions."""

from __future__ import annotations

import re

from .constants import MEMLEN_REGEX, REDUCE_HEX_REGEX, WORD_REGEX
from .opcodes import WrappedInput, WrappedOpcode

_WORD_MASK = (1 << 256) - 1
_USIZE_LIMIT = 1 << 64
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")

# Opcodes whose rendering is a template over their solidified inputs.
_TEMPLATES = {
    "ADD": "{0} + {1}",
    "MUL": "{0} * {1}",
    "SUB": "{0} - {1}",
    "DIV": "{0} / {1}",
    "SDIV": "{0} / {1}",
    "MOD": "{0} % {1}",
    "SMOD": "{0} % {1}",
    "ADDMOD": "{0} + {1} % {2}",
    "MULMOD": "({0} * {1}) % {2}",
    "EXP": "{0} ** {1}",
    "LT": "{0} < {1}",
    "GT": "{0} > {1}",
    "SLT": "{0} < {1}",
    "SGT": "{0} > {1}",
    "EQ": "{0} == {1}",
    "AND": "({0}) & ({1})",
    "OR": "{0} | {1}",
    "XOR": "{0} ^ {1}",
    "NOT": "~({0})",
    "SHL": "{0} << {1}",
    "SHR": "{0} >> {1}",
    "SAR": "{0} >> {1}",
    "SHA3": "keccak256(memory[{0}])",
    "BALANCE": "address({0}).balance",
    "EXTCODESIZE": "address({0}).code.length",
    "EXTCODEHASH": "address({0}).codehash",
    "BLOCKHASH": "blockhash({0})",
    "SLOAD": "storage[{0}]",
}

# Opcodes that render to a fixed expression.
_CONSTANTS = {
    "ADDRESS": "address(this)",
    "ORIGIN": "tx.origin",
    "CALLER": "msg.sender",
    "CALLVALUE": "msg.value",
    "CALLDATASIZE": "msg.data.length",
    "CODESIZE": "this.code.length",
    "COINBASE": "block.coinbase",
    "TIMESTAMP": "block.timestamp",
    "NUMBER": "block.number",
    "DIFFICULTY": "block.difficulty",
    "GASLIMIT": "block.gaslimit",
    "CHAINID": "block.chainid",
    "SELFBALANCE": "address(this).balance",
    "BASEFEE": "block.basefee",
    "GAS": "gasleft()",
    "GASPRICE": "tx.gasprice",
    "MSIZE": "memory.length",
    "RETURNDATASIZE": "ret0.length",
}

_CALLS = {"CALL", "CALLCODE", "DELEGATECALL", "STATICCALL"}


def is_ext_call_precompile(address: int) -> bool:
    """Whether an external call target is one of the precompiles 1, 2 or 3."""
    return address in (1, 2, 3)


def encode_hex_reduced(value: int) -> str:
    """Encode a word as hex with leading null bytes removed; zero becomes ``0``."""
    if value <= 0:
        return "0"
    encoded = f"0x{value & _WORD_MASK:064x}"
    return REDUCE_HEX_REGEX.sub("0x", encoded, count=1)


def _parse_hex(text: str) -> int | None:
    """Parse a bare hex string that fits a machine word, or return None."""
    if not _HEX_DIGITS.fullmatch(text):
        return None
    value = int(text, 16)
    return value if value < _USIZE_LIMIT else None


def _parse_word(text: str) -> int | None:
    """Parse a hex word with an optional ``0x`` prefix, or return None."""
    digits = text[2:] if text.startswith("0x") else text
    if not digits:
        return 0
    if not _HEX_DIGITS.fullmatch(digits) or len(digits) > 64:
        return None
    return int(digits, 16)


def solidify_input(value: WrappedInput) -> str:
    """Render one input of an operation, parenthesising compound expressions."""
    if isinstance(value, WrappedOpcode):
        rendered = solidify(value)
        return f"({rendered})" if " " in rendered else rendered
    return encode_hex_reduced(value)


def _calldataload(slot: str) -> str:
    if not WORD_REGEX.search(slot):
        return f"msg.data[{slot}]"
    offset = _parse_hex(slot.replace("0x", ""))
    if offset is not None:
        return f"arg{(offset - 4) // 32}"
    if "0x04 + " in slot or "+ 0x04" in slot:
        return slot.replace("0x04 + ", "").replace("+ 0x04", "")
    return f"msg.data[{slot}]"


def _mload(location: str) -> str:
    if "memory" not in location:
        return f"memory[{location}]"
    if "+" in location:
        parts = location.split(" + ")
        first = parts[0].replace("memory[", "").replace("]", "")
        second = parts[1].replace("memory[", "").replace("]", "")
        return f"memory[{first}][{second}]"
    if MEMLEN_REGEX.search(f"memory[{location}]"):
        return f"{location}.length"
    return f"memory[{location}]"


def _call(operation: WrappedOpcode) -> str:
    address = _parse_word(solidify_input(operation.inputs[1]))
    if address is not None and is_ext_call_precompile(address):
        return f"memory[{solidify_input(operation.inputs[5])}]"
    return "ret0"


def solidify(operation: WrappedOpcode) -> str:
    """Return the Solidity-like representation of a wrapped operation."""
    name = operation.opcode.name
    inputs = operation.inputs

    template = _TEMPLATES.get(name)
    if template is not None:
        arity = template.count("{")
        return template.format(*(solidify_input(item) for item in inputs[:arity]))
    constant = _CONSTANTS.get(name)
    if constant is not None:
        return constant

    if name == "ISZERO":
        rendered = solidify_input(inputs[0])
        return f"!({rendered})" if " " in rendered else f"!{rendered}"
    if name == "BYTE":
        return solidify_input(inputs[1])
    if name == "CALLDATALOAD":
        return _calldataload(solidify_input(inputs[0]))
    if name == "MLOAD":
        return _mload(solidify_input(inputs[0]))
    if name in _CALLS:
        return _call(operation)
    if name.startswith("PUSH"):
        return solidify_input(inputs[0])
    return name