"""Event logs emitted during execution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

_WORD_MASK = (1 << 256) - 1


@dataclass(frozen=True)
class Log:
    """An emitted event: its index, hex topics and hex data."""

    index: int
    topics: tuple[str, ...]
    data: str

    @classmethod
    def create(cls, index: int, topics: Iterable[int], data: str) -> Log:
        """Build a log, encoding each topic word as 64 hex digits."""
        return cls(index, tuple(f"{topic & _WORD_MASK:064x}" for topic in topics), data)