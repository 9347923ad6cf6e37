import pytest

from evmscope.execution import (
    WORD_MASK,
    ExecutionResult,
    Halt,
    Instruction,
    byte_at,
    encode_word,
    keccak256,
    sar,
    sdiv,
    signextend,
    smod,
    to_index,
    to_signed,
    to_unsigned,
)


@pytest.mark.parametrize("value", [0, 1, 2**255 - 1, 2**255, WORD_MASK])
def test_signed_round_trip(value):
    assert to_unsigned(to_signed(value)) == value


def test_to_signed_all_ones_is_minus_one():
    assert to_signed(WORD_MASK) == -1
    assert to_signed(2**255) == -(2**255)


def test_to_unsigned_wraps():
    assert to_unsigned(-1) == WORD_MASK
    assert to_unsigned(2**256 + 5) == 5


def test_to_index_accepts_small_values():
    assert to_index(5) == 5


def test_to_index_halts_on_overflow():
    with pytest.raises(Halt) as info:
        to_index(2**64)
    assert info.value.code == 2
    assert info.value.returndata == "0x"


def test_encode_word_format():
    assert encode_word(1) == "0x" + "0" * 63 + "1"
    assert encode_word(-1) == "0x" + "f" * 64
    assert int(encode_word(12345), 16) == 12345


def test_keccak256_empty_input():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )
    assert len(keccak256(b"abc")) == 32


def test_sdiv_truncates_toward_zero():
    assert sdiv(to_unsigned(-7), 2) == to_unsigned(-3)
    assert sdiv(7, 2) == 3
    assert sdiv(7, 0) == 0


def test_sdiv_min_by_minus_one_wraps():
    assert sdiv(2**255, WORD_MASK) == 2**255


def test_smod_takes_dividend_sign():
    assert to_signed(smod(to_unsigned(-7), 3)) == -1
    assert smod(7, to_unsigned(-3)) == 1
    assert smod(7, 0) == 0


def test_sar_preserves_sign():
    assert sar(1, to_unsigned(-4)) == to_unsigned(-2)
    assert sar(4, 0x100) == 0x10
    assert sar(300, WORD_MASK) == WORD_MASK
    assert sar(300, 2**200) == 0


def test_sar_halts_on_huge_shift():
    with pytest.raises(Halt):
        sar(2**64, 1)


def test_signextend():
    assert signextend(0, 0xFF) == WORD_MASK
    assert signextend(0, 0x7F) == 0x7F
    assert signextend(31, 2**255 + 3) == 2**255 + 3
    assert signextend(40, 0x80) == 0x80


def test_byte_at():
    value = int("ab" + "00" * 30 + "cd", 16)
    assert byte_at(0, value) == 0xAB
    assert byte_at(31, value) == 0xCD
    assert byte_at(32, value) == 0


def test_instruction_defaults_are_independent():
    first = Instruction(1, "01")
    second = Instruction(2, "02")
    first.inputs.append(1)
    assert second.inputs == []
    assert first.opcode_details is None


def test_execution_result_fields():
    result = ExecutionResult(21000, 0, "0x", 0, [], 0.0, 3)
    assert result.gas_used == 21000
    assert result.exitcode == 0
    assert result.instruction == 3