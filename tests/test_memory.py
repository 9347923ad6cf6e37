import pytest

from evmscope.memory import Memory


def test_new_memory_is_empty():
    memory = Memory()
    assert memory.size() == 0
    assert len(memory) == 0


def test_store_then_read_round_trip():
    memory = Memory()
    word = "ab" * 32
    memory.store(0, 32, word)
    assert memory.read(0, 32) == word
    assert memory.size() == 32


@pytest.mark.parametrize("offset,size", [(0, 1), (5, 3), (31, 2), (40, 32), (100, 7)])
def test_size_is_word_aligned_and_covers_write(offset, size):
    memory = Memory()
    memory.store(offset, size, "11" * size)
    assert memory.size() % 32 == 0
    assert memory.size() >= offset + size
    assert memory.read(offset, size) == "11" * size


def test_short_value_is_left_padded():
    memory = Memory()
    memory.store(0, 4, "ff")
    assert memory.read(0, 4) == "000000ff"


def test_long_value_keeps_last_bytes():
    memory = Memory()
    value = "00" * 31 + "7e"
    memory.store(3, 1, value)
    assert memory.read(3, 1) == "7e"
    assert memory.read(0, 3) == "000000"


def test_odd_length_value_is_ignored():
    memory = Memory()
    memory.store(0, 1, "abc")
    assert memory.size() == 0


def test_read_past_end_pads_with_zeros():
    memory = Memory()
    memory.store(0, 2, "beef")
    result = memory.read(30, 8)
    assert len(result) == 16
    assert result == "00" * 8


def test_read_partially_past_end_keeps_existing_bytes():
    memory = Memory()
    memory.store(31, 1, "cd")
    result = memory.read(31, 4)
    assert result.startswith("cd")
    assert len(result) == 8


def test_read_with_huge_offset_returns_zeros_without_growing():
    memory = Memory()
    assert memory.read(70000, 2) == "0000"
    assert memory.size() == 0


def test_overwrite_replaces_bytes_in_place():
    memory = Memory()
    memory.store(0, 32, "aa" * 32)
    memory.store(1, 1, "bb")
    assert memory.read(0, 3) == "aabbaa"
    assert memory.size() == 32


def test_extend_does_not_shrink():
    memory = Memory()
    memory.store(0, 64, "01" * 64)
    memory.extend(0, 1)
    assert memory.size() == 64


def test_copy_is_independent():
    memory = Memory()
    memory.store(0, 1, "aa")
    snapshot = memory.copy()
    memory.store(0, 1, "bb")
    assert snapshot.read(0, 1) == "aa"
    assert memory.read(0, 1) == "bb"