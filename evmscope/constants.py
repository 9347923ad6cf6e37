"""Regular expressions shared across the package."""

import re

# Validates Ethereum addresses.
ADDRESS_REGEX = re.compile(r"^(0x)?[0-9a-fA-F]{40}\Z")

# Validates Ethereum transaction hashes.
TRANSACTION_HASH_REGEX = re.compile(r"^(0x)?[0-9a-fA-F]{64}\Z")

# Validates raw bytecode targets, capped at roughly the 24kb contract size limit.
BYTECODE_REGEX = re.compile(r"^(0x)?[0-9a-fA-F]{0,50000}\Z")

# Reduces null byte prefixes.
REDUCE_HEX_REGEX = re.compile(r"^0x(00)*")

# Search pattern for words.
WORD_REGEX = re.compile(r"0x[0-9a-fA-F]{0,64}")

# Finds type castings.
TYPE_CAST_REGEX = re.compile(
    r"(address\(|string\(|bool\(|bytes(\d*)\(|uint(\d*)\(|int(\d*)\()"
)

# Finds memory length accesses.
MEMLEN_REGEX = re.compile(r"memory\[memory\[[0-9x]*\]\]")

# Finds memory accesses.
MEMORY_REGEX = re.compile(r"memory\[\(?[0-9x]*\]")

# Finds storage accesses.
STORAGE_REGEX = re.compile(r"storage\[\(?[0-9x]*\]")