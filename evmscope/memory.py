"""Byte-addressed scratch memory, held as a hex string."""

from __future__ import annotations

from dataclasses import dataclass

# Offsets and sizes are capped at this many bytes to keep memory bounded.
_CAP = 65536


@dataclass
class Memory:
    """Linear memory; two hex digits per byte."""

    data: str = ""

    def size(self) -> int:
        """Size of the memory in bytes."""
        return len(self.data) // 2

    def extend(self, offset: int, size: int) -> None:
        """Grow memory with null bytes so it covers ``offset + size``, word aligned."""
        end = offset + size
        remainder = end % 32
        new_size = end if remainder == 0 else end + 32 - remainder
        current = self.size()
        if current <= new_size and new_size > current:
            self.data += "00" * (new_size - current)

    def store(self, offset: int, size: int, value: str) -> None:
        """Write the last ``size`` bytes of a hex ``value`` at ``offset``.

        Values of odd length are ignored; shorter values are left-padded with
        null bytes.
        """
        if len(value) % 2:
            return
        offset = min(offset, _CAP)
        if size > _CAP:
            size = _CAP
            if len(value) // 2 > size:
                value = value[: size * 2]
        if len(value) // 2 < size:
            value = "00" * (size - len(value) // 2) + value
        self.extend(offset, size)
        value = value[len(value) - size * 2:]
        start = offset * 2
        self.data = self.data[:start] + value + self.data[start + len(value):]

    def read(self, offset: int, size: int) -> str:
        """Read ``size`` bytes at ``offset`` as hex, padding past the end with zeros."""
        if size > _CAP or offset > _CAP:
            return "00" * size
        if offset + size > self.size():
            value = self.data[offset * 2:] if offset <= self.size() else ""
            return value + "00" * (size - len(value) // 2)
        return self.data[offset * 2:(offset + size) * 2]

    def copy(self) -> Memory:
        """Return an independent snapshot of the memory."""
        return Memory(self.data)

    def __len__(self) -> int:
        return self.size()