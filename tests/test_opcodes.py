import pytest

from evmscope.opcodes import Opcode, WrappedOpcode, opcode


def test_known_opcodes():
    assert opcode("00") == Opcode("STOP", 0, 0, 0)
    assert opcode("01").name == "ADD"
    assert opcode("f1") == Opcode("CALL", 100, 7, 1)
    assert opcode("ff").name == "SELFDESTRUCT"


@pytest.mark.parametrize("code", ["0c", "zz", "0A", "", "100"])
def test_unknown_codes(code):
    assert opcode(code).name == "unknown"
    assert opcode(code).inputs == 0


@pytest.mark.parametrize("n", range(1, 33))
def test_push_family(n):
    op = opcode(f"{0x5F + n:02x}")
    assert op.name == f"PUSH{n}"
    assert (op.inputs, op.outputs) == (0, 1)


@pytest.mark.parametrize("n", range(1, 17))
def test_dup_and_swap_arity(n):
    dup = opcode(f"{0x7F + n:02x}")
    swap = opcode(f"{0x8F + n:02x}")
    assert dup.name == f"DUP{n}"
    assert dup.outputs == dup.inputs + 1 == n + 1
    assert swap.name == f"SWAP{n}"
    assert swap.inputs == swap.outputs == n + 1


def test_log_family_gas():
    assert opcode("a0").mingas == 375
    assert opcode("a4").mingas == 1875
    assert [opcode(f"a{n}").inputs for n in range(5)] == [2, 3, 4, 5, 6]


def test_from_code_pads_single_digit():
    wrapped = WrappedOpcode.from_code(0x01, [1, 2])
    assert wrapped.opcode.name == "ADD"
    assert wrapped.inputs == (1, 2)


def test_from_code_out_of_range_is_unknown():
    assert WrappedOpcode.from_code(0x100, []).opcode.name == "unknown"


def test_unknown_wrapped():
    wrapped = WrappedOpcode.unknown()
    assert wrapped.opcode.name == "unknown"
    assert wrapped.inputs == ()


def test_display_nested():
    inner = WrappedOpcode.from_code(0x01, [1, 2])
    outer = WrappedOpcode.from_code(0x01, [inner, 3])
    assert str(inner) == "ADD(1, 2)"
    assert str(outer) == f"ADD({inner}, 3)"


def test_equal_wrapped_opcodes_hash_alike():
    first = WrappedOpcode.from_code(0x16, [255, WrappedOpcode.unknown()])
    second = WrappedOpcode.from_code(0x16, [255, WrappedOpcode.unknown()])
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1