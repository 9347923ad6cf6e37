import pytest

from evmscope.opcodes import WrappedOpcode
from evmscope.solidity import (
    encode_hex_reduced,
    is_ext_call_precompile,
    solidify,
    solidify_input,
)


def op(code, *inputs):
    return WrappedOpcode.from_code(code, inputs)


def test_solidify_add():
    assert solidify(op(0x01, 1, 2)) == "0x01 + 0x02"


def test_solidify_add_complex():
    inner = op(0x01, 1, 2)
    assert solidify(op(0x01, inner, 3)) == "(0x01 + 0x02) + 0x03"


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (1, "0x01"),
        (0x1234, "0x1234"),
        (0x0100, "0x0100"),
        (2**255, "0x80" + "00" * 31),
    ],
)
def test_encode_hex_reduced(value, expected):
    assert encode_hex_reduced(value) == expected


@pytest.mark.parametrize("address, expected", [(1, True), (2, True), (3, True), (0, False), (4, False), (2**200, False)])
def test_is_ext_call_precompile(address, expected):
    assert is_ext_call_precompile(address) is expected


def test_solidify_input_wraps_compound():
    assert solidify_input(op(0x02, 2, 3)) == "(0x02 * 0x03)"
    assert solidify_input(op(0x33)) == "msg.sender"
    assert solidify_input(16) == "0x10"


def test_iszero_simple_and_compound():
    assert solidify(op(0x15, 1)) == "!0x01"
    assert solidify(op(0x15, op(0x01, 1, 2))) == "!((0x01 + 0x02))"


def test_and_and_not():
    assert solidify(op(0x16, 0xFF, op(0x33))) == "(0xff) & (msg.sender)"
    assert solidify(op(0x19, 1)) == "~(0x01)"


def test_mulmod_and_addmod():
    assert solidify(op(0x09, 1, 2, 3)) == "(0x01 * 0x02) % 0x03"
    assert solidify(op(0x08, 1, 2, 3)) == "0x01 + 0x02 % 0x03"


def test_calldataload_constant_slot():
    assert solidify(op(0x35, 0x04)) == "arg0"
    assert solidify(op(0x35, 0x24)) == "arg1"


def test_calldataload_offset_expression():
    slot = op(0x01, 4, op(0x33))
    assert solidify(op(0x35, slot)) == "(msg.sender)"


def test_calldataload_dynamic_slot():
    assert solidify(op(0x35, op(0x33))) == "msg.data[msg.sender]"


def test_mload_plain_and_length():
    assert solidify(op(0x51, 0x40)) == "memory[0x40]"
    assert solidify(op(0x51, op(0x51, 0x40))) == "memory[0x40].length"


def test_call_to_precompile_reads_memory():
    call = op(0xF1, 0x100, 2, 0, 0, 0, 0x80, 0x20)
    assert solidify(call) == "memory[0x80]"


def test_call_to_contract_returns_ret0():
    assert solidify(op(0xF1, 0x100, 0x10, 0, 0, 0, 0x80, 0x20)) == "ret0"
    assert solidify(op(0xFA, 0x100, op(0x33), 0, 0, 0x80, 0x20)) == "ret0"


def test_push_byte_and_fallbacks():
    assert solidify(op(0x60, 5)) == "0x05"
    assert solidify(op(0x1A, 0, op(0x33))) == "msg.sender"
    assert solidify(op(0x00)) == "STOP"
    assert solidify(op(0x0C)) == "unknown"
    assert solidify(WrappedOpcode.unknown()) == "unknown"


def test_environment_constants():
    assert solidify(op(0x30)) == "address(this)"
    assert solidify(op(0x5A)) == "gasleft()"
    assert solidify(op(0x3D)) == "ret0.length"
    assert solidify(op(0x54, 0)) == "storage[0]"
    assert solidify(op(0x20, 0x40, 0x20)) == "keccak256(memory[0x40])"


def test_missing_input_raises():
    with pytest.raises(IndexError):
        solidify(op(0x01, 1))