"""Environment, memory, storage, control-flow and system instructions."""

from __future__ import annotations

import time
from typing import Any, Callable

from .execution import Halt, encode_word, keccak256, to_index
from .log import Log
from .opcodes import WrappedOpcode

_COINBASE = "0x6865696d64616c6c00000000636f696e62617365"
_CREATE_ADDRESS = "0x6865696d64616c6c000000000000637265617465"
_CREATE2_ADDRESS = "0x6865696d64616c6c000000000063726561746532"
_JUMPDEST = "5b"
_PC_LIMIT = 1 << 128

Handler = Callable[[Any, int, WrappedOpcode], None]


def _word_hex(value: int) -> str:
    return encode_word(value)[2:]


def _stop(vm: Any, op: int, operation: WrappedOpcode) -> None:
    raise Halt(0, "0x")


def _sha3(vm: Any, op: int, operation: WrappedOpcode) -> None:
    offset = vm.stack.pop().value
    size = vm.stack.pop().value
    offset, size = to_index(offset), to_index(size)
    data = bytes.fromhex(vm.memory.read(offset, size))
    vm.stack.push(int.from_bytes(keccak256(data), "big"), operation)


def _push_constant(value: Any) -> Handler:
    def handler(vm: Any, op: int, operation: WrappedOpcode) -> None:
        vm.stack.push(value, operation)

    return handler


def _pop_then_push(count: int, value: Any) -> Handler:
    def handler(vm: Any, op: int, operation: WrappedOpcode) -> None:
        vm.stack.pop_n(count)
        vm.stack.push(value, operation)

    return handler


def _address(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.address, operation)


def _origin(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.origin, operation)


def _caller(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.caller, operation)


def _callvalue(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.value, operation)


def _calldataload(vm: Any, op: int, operation: WrappedOpcode) -> None:
    i = to_index(vm.stack.pop().value)
    calldata = vm.calldata
    length = len(calldata) // 2
    if i + 32 > length:
        value = calldata[i * 2:] if i <= length else ""
        value += "00" * (32 - len(value) // 2)
    else:
        value = calldata[i * 2:(i + 32) * 2]
    vm.stack.push(value, operation)


def _calldatasize(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(len(vm.calldata) // 2, operation)


def _pop_copy_args(vm: Any) -> tuple[int, int, int]:
    dest_offset = vm.stack.pop().value
    offset = vm.stack.pop().value
    size = vm.stack.pop().value
    return to_index(dest_offset), to_index(offset), to_index(size)


def _pad_copy(value: str, size: int) -> str:
    if len(value) < size * 2:
        value += "00" * (size - len(value) // 2)
    return value


def _calldatacopy(vm: Any, op: int, operation: WrappedOpcode) -> None:
    dest_offset, offset, size = _pop_copy_args(vm)
    end = min((offset + size) * 2, len(vm.calldata))
    value = vm.calldata[offset * 2:end]
    vm.memory.store(dest_offset, size, _pad_copy(value, size))


def _codesize(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(max(len(vm.bytecode) // 2 - 1, 0), operation)


def _codecopy(vm: Any, op: int, operation: WrappedOpcode) -> None:
    dest_offset, offset, size = _pop_copy_args(vm)
    # The copy window is bounded by the calldata length, as the reference does.
    end = min((offset + size) * 2, len(vm.calldata))
    start = offset * 2
    value = vm.bytecode[start:end] if start <= end <= len(vm.bytecode) else ""
    vm.memory.store(dest_offset, size, _pad_copy(value, size))


def _extcodecopy(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.pop()
    dest_offset = vm.stack.pop().value
    vm.stack.pop()
    size = vm.stack.pop().value
    dest_offset, size = to_index(dest_offset), to_index(size)
    vm.memory.store(dest_offset, size, "FF" * (size // 2))


def _returndatacopy(vm: Any, op: int, operation: WrappedOpcode) -> None:
    dest_offset = vm.stack.pop().value
    vm.stack.pop()
    size = vm.stack.pop().value
    dest_offset, size = to_index(dest_offset), to_index(size)
    vm.memory.store(dest_offset, size, "FF" * (size // 2))


def _timestamp(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(int(time.time()), operation)


def _pop(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.pop()


def _mload(vm: Any, op: int, operation: WrappedOpcode) -> None:
    i = to_index(vm.stack.pop().value)
    vm.stack.push(vm.memory.read(i, 32), operation)


def _mstore(vm: Any, op: int, operation: WrappedOpcode) -> None:
    offset = vm.stack.pop().value
    value = _word_hex(vm.stack.pop().value)
    size = 32 if op == 0x52 else 1
    vm.memory.store(to_index(offset), size, value)


def _sload(vm: Any, op: int, operation: WrappedOpcode) -> None:
    key = _word_hex(vm.stack.pop().value)
    vm.stack.push(vm.storage.load(key), operation)


def _sstore(vm: Any, op: int, operation: WrappedOpcode) -> None:
    key = _word_hex(vm.stack.pop().value)
    value = _word_hex(vm.stack.pop().value)
    vm.storage.store(key, value)


def _jump_to(vm: Any, pc: int) -> None:
    if pc >= _PC_LIMIT:
        raise Halt(2)
    start = (pc + 1) * 2
    if start + 2 <= len(vm.bytecode) and vm.bytecode[start:start + 2] != _JUMPDEST:
        raise Halt(790)
    vm.instruction = pc + 1


def _jump(vm: Any, op: int, operation: WrappedOpcode) -> None:
    _jump_to(vm, vm.stack.pop().value)


def _jumpi(vm: Any, op: int, operation: WrappedOpcode) -> None:
    pc = vm.stack.pop().value
    condition = vm.stack.pop().value
    if pc >= _PC_LIMIT:
        raise Halt(2)
    if condition != 0:
        _jump_to(vm, pc)


def _pc(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.instruction, operation)


def _msize(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.memory.size(), operation)


def _gas(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.push(vm.gas_remaining, operation)


def _push(vm: Any, op: int, operation: WrappedOpcode) -> None:
    count = op - 0x5F
    start = vm.instruction * 2
    data = vm.bytecode[start:start + count * 2]
    vm.instruction += count
    value = int(data, 16) if data else 0
    vm.stack.push(value, WrappedOpcode(operation.opcode, (value,)))


def _dup(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.dup(op - 0x7F)


def _swap(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.stack.swap(op - 0x8F)


def _log(vm: Any, op: int, operation: WrappedOpcode) -> None:
    topic_count = op - 0xA0
    offset = vm.stack.pop().value
    size = vm.stack.pop().value
    topics = [frame.value for frame in vm.stack.pop_n(topic_count)]
    offset, size = to_index(offset), to_index(size)
    data = vm.memory.read(offset, size)
    vm.events.append(Log.create(len(vm.events), topics, data))


def _exit_with_memory(code: int) -> Handler:
    def handler(vm: Any, op: int, operation: WrappedOpcode) -> None:
        offset = vm.stack.pop().value
        size = vm.stack.pop().value
        offset, size = to_index(offset), to_index(size)
        raise Halt(code, vm.memory.read(offset, size))

    return handler


def _invalid(vm: Any, op: int, operation: WrappedOpcode) -> None:
    vm.consume_gas(vm.gas_remaining)
    raise Halt(1, "0x")


def _build_handlers() -> dict[int, Handler]:
    handlers: dict[int, Handler] = {
        0x00: _stop,
        0x20: _sha3,
        0x30: _address,
        0x31: _pop_then_push(1, 1),
        0x32: _origin,
        0x33: _caller,
        0x34: _callvalue,
        0x35: _calldataload,
        0x36: _calldatasize,
        0x37: _calldatacopy,
        0x38: _codesize,
        0x39: _codecopy,
        0x3A: _push_constant(1),
        0x3B: _pop_then_push(1, 1),
        0x3C: _extcodecopy,
        0x3D: _push_constant(0),
        0x3E: _returndatacopy,
        0x3F: _pop_then_push(1, 0),
        0x40: _pop_then_push(1, 0),
        0x41: _push_constant(_COINBASE),
        0x42: _timestamp,
        0x50: _pop,
        0x51: _mload,
        0x52: _mstore,
        0x53: _mstore,
        0x54: _sload,
        0x55: _sstore,
        0x56: _jump,
        0x57: _jumpi,
        0x58: _pc,
        0x59: _msize,
        0x5A: _gas,
        0xF0: _pop_then_push(3, _CREATE_ADDRESS),
        0xF1: _pop_then_push(7, 1),
        0xF2: _pop_then_push(7, 1),
        0xF3: _exit_with_memory(0),
        0xF4: _pop_then_push(6, 1),
        0xF5: _pop_then_push(4, _CREATE2_ADDRESS),
        0xFA: _pop_then_push(6, 1),
        0xFD: _exit_with_memory(1),
        0xFE: _invalid,
        0xFF: _invalid,
    }
    handlers.update({code: _push_constant(1) for code in range(0x43, 0x49)})
    handlers.update({code: _push for code in range(0x60, 0x80)})
    handlers.update({code: _dup for code in range(0x80, 0x90)})
    handlers.update({code: _swap for code in range(0x90, 0xA0)})
    handlers.update({code: _log for code in range(0xA0, 0xA5)})
    return handlers


_HANDLERS = _build_handlers()


def handle(vm: Any, op: int, operation: WrappedOpcode) -> bool:
    """Execute ``op`` against ``vm`` if it is a non-arithmetic instruction.

    Returns whether the instruction was handled. Raises ``Halt`` when the
    instruction ends execution or an operand does not fit a machine index.
    """
    handler = _HANDLERS.get(op)
    if handler is None:
        return False
    handler(vm, op, operation)
    return True