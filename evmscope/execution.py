"""Shared types and word arithmetic for the virtual machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from Crypto.Hash import keccak as _keccak

from .log import Log
from .opcodes import Opcode, WrappedOpcode

WORD_BITS = 256
WORD_MASK = (1 << WORD_BITS) - 1
_SIGN_BIT = 1 << (WORD_BITS - 1)
_INDEX_LIMIT = 1 << 64


class Halt(Exception):
    """Stops execution with an exit code and return data."""

    def __init__(self, code: int, returndata: str = "0x") -> None:
        super().__init__(f"execution halted with code {code}")
        self.code = code
        self.returndata = returndata


@dataclass
class Instruction:
    """Trace record of one executed instruction."""

    instruction: int
    opcode: str
    opcode_details: Optional[Opcode] = None
    inputs: list[int] = field(default_factory=list)
    outputs: list[int] = field(default_factory=list)
    input_operations: list[WrappedOpcode] = field(default_factory=list)
    output_operations: list[WrappedOpcode] = field(default_factory=list)


@dataclass
class State:
    """Snapshot of the machine after a step."""

    last_instruction: Instruction
    gas_used: int
    gas_remaining: int
    stack: Any
    memory: Any
    storage: Any
    events: list[Log]


@dataclass
class ExecutionResult:
    """Outcome of running code to completion."""

    gas_used: int
    gas_remaining: int
    returndata: str
    exitcode: int
    events: list[Log]
    runtime: float
    instruction: int


def to_signed(value: int) -> int:
    """Interpret a 256-bit word as a two's-complement integer."""
    value &= WORD_MASK
    return value - (1 << WORD_BITS) if value & _SIGN_BIT else value


def to_unsigned(value: int) -> int:
    """Wrap an integer into a 256-bit word."""
    return value & WORD_MASK


def to_index(value: int) -> int:
    """Convert a word to a machine-sized index, halting with code 2 if too large."""
    if not 0 <= value < _INDEX_LIMIT:
        raise Halt(2)
    return value


def encode_word(value: int) -> str:
    """Encode a word (negative values in two's complement) as ``0x`` + 64 hex digits."""
    return f"0x{value & WORD_MASK:064x}"


def keccak256(data: bytes) -> bytes:
    """Return the Keccak-256 digest of ``data``."""
    return _keccak.new(digest_bits=256, data=bytes(data)).digest()


def sdiv(a: int, b: int) -> int:
    """Signed division of two words, truncating toward zero; division by zero gives 0."""
    if b & WORD_MASK == 0:
        return 0
    numerator, denominator = to_signed(a), to_signed(b)
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        quotient = -quotient
    return to_unsigned(quotient)


def smod(a: int, b: int) -> int:
    """Signed remainder of two words, taking the dividend's sign; modulo zero gives 0."""
    if b & WORD_MASK == 0:
        return 0
    dividend, divisor = to_signed(a), to_signed(b)
    remainder = abs(dividend) % abs(divisor)
    return to_unsigned(-remainder if dividend < 0 else remainder)


def sar(shift: int, value: int) -> int:
    """Arithmetic right shift of a word; a shift beyond index range halts."""
    amount = to_index(shift)
    if value & WORD_MASK == 0:
        return 0
    signed = to_signed(value)
    if amount >= WORD_BITS:
        return WORD_MASK if signed < 0 else 0
    return to_unsigned(signed >> amount)


def signextend(x: int, b: int) -> int:
    """Sign-extend ``b`` from byte ``x`` (counted from the least significant end)."""
    t = x * 8 + 7
    sign_bit = (1 << t) & WORD_MASK if t < WORD_BITS else 0
    low = b & ((sign_bit - 1) & WORD_MASK)
    return to_unsigned(low - (b & sign_bit))


def byte_at(index: int, value: int) -> int:
    """Return byte ``index`` of a word, counted from the most significant end."""
    if index >= 32:
        return 0
    return (value >> (8 * (31 - index))) & 0xFF