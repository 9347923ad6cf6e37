"""Arithmetic, comparison and bitwise instructions."""

from __future__ import annotations

from typing import Any, Callable

from .execution import (
    WORD_BITS,
    WORD_MASK,
    byte_at,
    sar,
    sdiv,
    signextend,
    smod,
    to_signed,
)
from .opcodes import WrappedOpcode
from .stack import StackFrame

_PUSH32 = 0x7F


def _shl(shift: int, value: int) -> int:
    return (value << shift) & WORD_MASK if shift < WORD_BITS else 0


def _shr(shift: int, value: int) -> int:
    if value == 0 or shift >= WORD_BITS:
        return 0
    return value >> shift


# Two-input operations whose result folds to a constant when both inputs are pushes.
_BINARY: dict[int, Callable[[int, int], int]] = {
    0x01: lambda a, b: (a + b) & WORD_MASK,
    0x02: lambda a, b: (a * b) & WORD_MASK,
    0x03: lambda a, b: (a - b) & WORD_MASK,
    0x04: lambda a, b: a // b if b else 0,
    0x05: sdiv,
    0x06: lambda a, b: a % b if b else 0,
    0x07: smod,
    0x0A: lambda a, b: pow(a, b, 1 << WORD_BITS),
    0x16: lambda a, b: a & b,
    0x17: lambda a, b: a | b,
    0x18: lambda a, b: a ^ b,
    0x1B: _shl,
    0x1C: _shr,
    0x1D: sar,
}

_TERNARY: dict[int, Callable[[int, int], int]] = {
    0x08: lambda a, b: (a + b) & WORD_MASK,
    0x09: lambda a, b: (a * b) & WORD_MASK,
}

_COMPARISONS: dict[int, Callable[[int, int], bool]] = {
    0x10: lambda a, b: a < b,
    0x11: lambda a, b: a > b,
    0x12: lambda a, b: to_signed(a) < to_signed(b),
    0x13: lambda a, b: to_signed(a) > to_signed(b),
    0x14: lambda a, b: a == b,
}


def _is_push(frame: StackFrame) -> bool:
    return frame.operation.opcode.name.startswith("PUSH")


def _folded(result: int, operation: WrappedOpcode, *frames: StackFrame) -> WrappedOpcode:
    if all(_is_push(frame) for frame in frames):
        return WrappedOpcode.from_code(_PUSH32, [result])
    return operation


def handle(vm: Any, op: int, operation: WrappedOpcode) -> bool:
    """Execute ``op`` on ``vm.stack`` if it is an ALU instruction.

    Returns whether the instruction was handled. Raises ``Halt`` when an
    operand does not fit a machine index.
    """
    stack = vm.stack

    if op in _BINARY:
        a, b = stack.pop(), stack.pop()
        result = _BINARY[op](a.value, b.value)
        stack.push(result, _folded(result, operation, a, b))
        return True

    if op in _TERNARY:
        a, b, modulus = stack.pop(), stack.pop(), stack.pop()
        result = _TERNARY[op](a.value, b.value) % modulus.value if modulus.value else 0
        stack.push(result, _folded(result, operation, a, modulus))
        return True

    if op in _COMPARISONS:
        a, b = stack.pop().value, stack.pop().value
        stack.push(1 if _COMPARISONS[op](a, b) else 0, operation)
        return True

    if op == 0x0B:
        x, b = stack.pop().value, stack.pop().value
        stack.push(signextend(x, b), operation)
        return True

    if op == 0x15:
        a = stack.pop().value
        stack.push(1 if a == 0 else 0, operation)
        return True

    if op == 0x19:
        a = stack.pop()
        result = a.value ^ WORD_MASK
        stack.push(result, _folded(result, operation, a))
        return True

    if op == 0x1A:
        index, value = stack.pop().value, stack.pop().value
        stack.push(byte_at(index, value), operation)
        return True

    return False