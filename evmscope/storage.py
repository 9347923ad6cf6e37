"""Persistent key/value storage with 32-byte hex keys and values."""

from __future__ import annotations

from dataclasses import dataclass, field

_NULL_WORD = "0" * 64


def _pad(word: str) -> str:
    if len(word) < 64:
        return "00" * (32 - len(word) // 2) + word
    return word


@dataclass
class Storage:
    """Mapping of hex keys to hex values, both padded to 32 bytes."""

    slots: dict[str, str] = field(default_factory=dict)

    def store(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``; values of odd length are ignored."""
        value = value.replace("0x", "")
        if len(value) % 2:
            return
        self.slots[_pad(key)] = _pad(value)

    def load(self, key: str) -> str:
        """Return the value under ``key``, or a null word if it is unset."""
        return self.slots.get(_pad(key), _NULL_WORD)

    def copy(self) -> Storage:
        """Return an independent snapshot of the storage."""
        return Storage(dict(self.slots))