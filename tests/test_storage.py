from evmscope.storage import Storage


def test_load_missing_key_returns_null_word():
    storage = Storage()
    assert storage.load("01") == "0000000000000000000000000000000000000000000000000000000000000000"


def test_store_and_load_pads_to_32_bytes():
    storage = Storage()
    storage.store("01", "02")
    value = storage.load("01")
    assert len(value) == 64
    assert value == "00" * 31 + "02"


def test_short_and_full_keys_address_same_slot():
    storage = Storage()
    storage.store("0a", "ff")
    assert storage.load("00" * 31 + "0a") == "00" * 31 + "ff"


def test_value_prefix_is_stripped():
    storage = Storage()
    storage.store("01", "0x1234")
    assert storage.load("01") == "00" * 30 + "1234"


def test_odd_length_value_is_ignored():
    storage = Storage()
    storage.store("01", "123")
    assert storage.slots == {}


def test_full_word_round_trip():
    storage = Storage()
    key = "ab" * 32
    value = "cd" * 32
    storage.store(key, value)
    assert storage.load(key) == value


def test_overwrite_replaces_value():
    storage = Storage()
    storage.store("01", "aa")
    storage.store("01", "bb")
    assert storage.load("01") == "00" * 31 + "bb"
    assert len(storage.slots) == 1


def test_copy_is_independent():
    storage = Storage()
    storage.store("01", "aa")
    snapshot = storage.copy()
    storage.store("01", "bb")
    assert snapshot.load("01") == "00" * 31 + "aa"