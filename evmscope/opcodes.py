"""EVM opcode table and wrapped operation trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Opcode:
    """Static description of an EVM instruction."""

    name: str
    mingas: int
    inputs: int
    outputs: int


def _build_table() -> dict[str, Opcode]:
    entries = [
        (0x00, "STOP", 0, 0, 0),
        (0x01, "ADD", 3, 2, 1),
        (0x02, "MUL", 5, 2, 1),
        (0x03, "SUB", 3, 2, 1),
        (0x04, "DIV", 5, 2, 1),
        (0x05, "SDIV", 5, 2, 1),
        (0x06, "MOD", 5, 2, 1),
        (0x07, "SMOD", 5, 2, 1),
        (0x08, "ADDMOD", 8, 3, 1),
        (0x09, "MULMOD", 8, 3, 1),
        (0x0A, "EXP", 10, 2, 1),
        (0x0B, "SIGNEXTEND", 5, 2, 1),
        (0x10, "LT", 3, 2, 1),
        (0x11, "GT", 3, 2, 1),
        (0x12, "SLT", 3, 2, 1),
        (0x13, "SGT", 3, 2, 1),
        (0x14, "EQ", 3, 2, 1),
        (0x15, "ISZERO", 3, 1, 1),
        (0x16, "AND", 3, 2, 1),
        (0x17, "OR", 3, 2, 1),
        (0x18, "XOR", 3, 2, 1),
        (0x19, "NOT", 3, 1, 1),
        (0x1A, "BYTE", 3, 2, 1),
        (0x1B, "SHL", 3, 2, 1),
        (0x1C, "SHR", 3, 2, 1),
        (0x1D, "SAR", 3, 2, 1),
        (0x20, "SHA3", 30, 2, 1),
        (0x30, "ADDRESS", 2, 0, 1),
        (0x31, "BALANCE", 100, 1, 1),
        (0x32, "ORIGIN", 2, 0, 1),
        (0x33, "CALLER", 2, 0, 1),
        (0x34, "CALLVALUE", 2, 0, 1),
        (0x35, "CALLDATALOAD", 3, 1, 1),
        (0x36, "CALLDATASIZE", 2, 0, 1),
        (0x37, "CALLDATACOPY", 3, 3, 0),
        (0x38, "CODESIZE", 2, 0, 1),
        (0x39, "CODECOPY", 3, 3, 0),
        (0x3A, "GASPRICE", 2, 0, 1),
        (0x3B, "EXTCODESIZE", 100, 1, 1),
        (0x3C, "EXTCODECOPY", 100, 4, 0),
        (0x3D, "RETURNDATASIZE", 2, 0, 1),
        (0x3E, "RETURNDATACOPY", 3, 3, 0),
        (0x3F, "EXTCODEHASH", 100, 1, 1),
        (0x40, "BLOCKHASH", 20, 1, 1),
        (0x41, "COINBASE", 2, 0, 1),
        (0x42, "TIMESTAMP", 2, 0, 1),
        (0x43, "NUMBER", 2, 0, 1),
        (0x44, "DIFFICULTY", 2, 0, 1),
        (0x45, "GASLIMIT", 2, 0, 1),
        (0x46, "CHAINID", 2, 0, 1),
        (0x47, "SELFBALANCE", 5, 0, 1),
        (0x48, "BASEFEE", 2, 0, 1),
        (0x50, "POP", 2, 1, 0),
        (0x51, "MLOAD", 3, 1, 1),
        (0x52, "MSTORE", 3, 2, 0),
        (0x53, "MSTORE8", 3, 2, 0),
        (0x54, "SLOAD", 100, 1, 1),
        (0x55, "SSTORE", 100, 2, 0),
        (0x56, "JUMP", 8, 1, 0),
        (0x57, "JUMPI", 10, 2, 0),
        (0x58, "PC", 2, 0, 1),
        (0x59, "MSIZE", 2, 0, 1),
        (0x5A, "GAS", 2, 0, 1),
        (0x5B, "JUMPDEST", 1, 0, 0),
        (0xF0, "CREATE", 32000, 3, 1),
        (0xF1, "CALL", 100, 7, 1),
        (0xF2, "CALLCODE", 100, 7, 1),
        (0xF3, "RETURN", 0, 2, 0),
        (0xF4, "DELEGATECALL", 100, 6, 1),
        (0xF5, "CREATE2", 32000, 4, 1),
        (0xFA, "STATICCALL", 100, 6, 1),
        (0xFD, "REVERT", 0, 2, 0),
        (0xFE, "INVALID", 0, 0, 0),
        (0xFF, "SELFDESTRUCT", 5000, 1, 0),
    ]
    entries += [(0x5F + n, f"PUSH{n}", 3, 0, 1) for n in range(1, 33)]
    entries += [(0x7F + n, f"DUP{n}", 3, n, n + 1) for n in range(1, 17)]
    entries += [(0x8F + n, f"SWAP{n}", 3, n + 1, n + 1) for n in range(1, 17)]
    entries += [(0xA0 + n, f"LOG{n}", 375 * (n + 1), n + 2, 0) for n in range(5)]
    return {
        f"{code:02x}": Opcode(name, mingas, inputs, outputs)
        for code, name, mingas, inputs, outputs in entries
    }


_OPCODES = _build_table()
_UNKNOWN = Opcode("unknown", 0, 0, 0)


def opcode(code: str) -> Opcode:
    """Return the opcode for a two-digit lowercase hex code, or ``unknown``."""
    return _OPCODES.get(code, _UNKNOWN)


@dataclass(frozen=True)
class WrappedOpcode:
    """An opcode together with the operations or raw values feeding it."""

    opcode: Opcode
    inputs: tuple[WrappedInput, ...] = ()

    @classmethod
    def from_code(cls, opcode_int: int, inputs: Iterable[WrappedInput] = ()) -> WrappedOpcode:
        """Wrap the opcode with the given numeric code around ``inputs``."""
        return cls(opcode(f"{opcode_int:02x}"), tuple(inputs))

    @classmethod
    def unknown(cls) -> WrappedOpcode:
        """The placeholder operation used for values of unknown origin."""
        return cls(_UNKNOWN, ())

    def __str__(self) -> str:
        return f"{self.opcode.name}({', '.join(str(item) for item in self.inputs)})"


WrappedInput = Union[int, WrappedOpcode]