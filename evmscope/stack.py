"""A LIFO stack of words, each tagged with the operation that produced it."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Union

from .opcodes import WrappedOpcode

_WORD_LIMIT = 1 << 256


def _parse_value(value: Union[int, str]) -> int:
    """Turn an integer or a hex string (with or without ``0x``) into a word."""
    if isinstance(value, str):
        digits = value[2:] if value.startswith(("0x", "0X")) else value
        if not digits:
            return 0
        if len(digits) > 64:
            raise ValueError(f"value does not fit in 256 bits: {value!r}")
        try:
            number = int(digits, 16)
        except ValueError as exc:
            raise ValueError(f"invalid hex value: {value!r}") from exc
    else:
        number = int(value)
    if not 0 <= number < _WORD_LIMIT:
        raise ValueError(f"value does not fit in 256 bits: {value!r}")
    return number


@dataclass(frozen=True)
class StackFrame:
    """A value on the stack and the operation that produced it."""

    value: int
    operation: WrappedOpcode


def _empty_frame() -> StackFrame:
    return StackFrame(0, WrappedOpcode.unknown())


@dataclass
class Stack:
    """LIFO stack; index 0 is the top."""

    frames: deque = field(default_factory=deque)

    def push(self, value: Union[int, str], operation: WrappedOpcode) -> None:
        """Push a value (an integer or a hex string) onto the stack."""
        self.frames.appendleft(StackFrame(_parse_value(value), operation))

    def pop(self) -> StackFrame:
        """Pop the top frame; an empty stack yields a zero frame."""
        if not self.frames:
            return _empty_frame()
        return self.frames.popleft()

    def pop_n(self, n: int) -> list[StackFrame]:
        """Pop ``n`` frames, top first."""
        return [self.pop() for _ in range(n)]

    def swap(self, n: int) -> bool:
        """Swap the top frame with the ``n``-th one below it."""
        if n < 0 or n >= len(self.frames):
            return False
        self.frames[0], self.frames[n] = self.frames[n], self.frames[0]
        return True

    def dup(self, n: int) -> bool:
        """Push a copy of the ``n``-th frame (1 is the top)."""
        if n < 1 or n > len(self.frames):
            return False
        self.frames.appendleft(self.frames[n - 1])
        return True

    def peek(self, index: int) -> StackFrame:
        """Return the frame at ``index`` from the top, or a zero frame."""
        if 0 <= index < len(self.frames):
            return self.frames[index]
        return _empty_frame()

    def peek_n(self, n: int) -> list[StackFrame]:
        """Return the top ``n`` frames, padding with zero frames."""
        return [self.peek(i) for i in range(n)]

    def is_empty(self) -> bool:
        """Whether the stack holds no frames."""
        return not self.frames

    def copy(self) -> Stack:
        """Return an independent snapshot of the stack."""
        return Stack(deque(self.frames))

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[StackFrame]:
        return iter(self.frames)