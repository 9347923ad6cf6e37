"""A small EVM interpreter that records a trace of wrapped operations."""

from __future__ import annotations

import re
import time

from . import alu, environment
from .execution import ExecutionResult, Halt, Instruction, State
from .log import Log
from .memory import Memory
from .opcodes import WrappedOpcode, opcode
from .stack import Stack
from .storage import Storage

_BASE_GAS = 21000
_GAS_CEILING = (1 << 128) - 1
_RUNNING = 255
_HEX_BYTE = re.compile(r"[0-9a-fA-F]{1,2}")


class VM:
    """Executes bytecode against a stack, memory and storage."""

    def __init__(
        self,
        bytecode: str,
        calldata: str = "",
        address: str = "",
        origin: str = "",
        caller: str = "",
        value: int = 0,
        gas_limit: int = _BASE_GAS,
    ) -> None:
        gas_limit = max(gas_limit, _BASE_GAS)
        self.stack = Stack()
        self.memory = Memory()
        self.storage = Storage()
        self.instruction = 1
        self.bytecode = "0x" + bytecode.replace("0x", "")
        self.calldata = calldata.replace("0x", "")
        self.address = address.replace("0x", "")
        self.origin = origin.replace("0x", "")
        self.caller = caller.replace("0x", "")
        self.value = value
        self.gas_remaining = gas_limit - _BASE_GAS
        self.gas_used = _BASE_GAS
        self.events: list[Log] = []
        self.returndata = ""
        self.exitcode = _RUNNING
        self.started_at = time.perf_counter()

    def exit(self, code: int, returndata: str) -> None:
        """Record the exit code and return data, ending execution."""
        self.exitcode = code
        self.returndata = returndata

    def consume_gas(self, amount: int) -> bool:
        """Spend ``amount`` gas; returns False, spending nothing, if too little is left."""
        if amount > self.gas_remaining:
            return False
        self.gas_remaining -= amount
        self.gas_used = min(self.gas_used + amount, _GAS_CEILING)
        return True

    def _step(self) -> Instruction:
        if len(self.bytecode) < self.instruction * 2 + 2:
            self.exit(2, "0x")
            return Instruction(self.instruction, "PANIC")

        start = self.instruction * 2
        code = self.bytecode[start:start + 2]
        last_instruction = self.instruction
        self.instruction += 1

        details = opcode(code.replace("0x", ""))
        input_frames = self.stack.peek_n(details.inputs)
        input_operations = [frame.operation for frame in input_frames]
        inputs = [frame.value for frame in input_frames]

        def halted() -> Instruction:
            return Instruction(
                last_instruction, code, details, inputs, [], input_operations, []
            )

        if not self.consume_gas(details.mingas):
            self.exit(0, "0x")
            return halted()

        if not _HEX_BYTE.fullmatch(code):
            self.exit(4, "0x")
            return Instruction(
                last_instruction, "unknown", details, inputs, [], input_operations, []
            )

        op = int(code, 16)
        operation = WrappedOpcode.from_code(op, input_operations)
        try:
            if not alu.handle(self, op, operation):
                environment.handle(self, op, operation)
        except Halt as halt:
            self.exit(halt.code, halt.returndata)
            return halted()

        output_frames = self.stack.peek_n(details.outputs)
        return Instruction(
            last_instruction,
            code,
            details,
            inputs,
            [frame.value for frame in output_frames],
            input_operations,
            [frame.operation for frame in output_frames],
        )

    def step(self) -> State:
        """Execute the next instruction and return a snapshot of the machine."""
        instruction = self._step()
        return State(
            last_instruction=instruction,
            gas_used=self.gas_used,
            gas_remaining=self.gas_remaining,
            stack=self.stack.copy(),
            memory=self.memory.copy(),
            storage=self.storage.copy(),
            events=list(self.events),
        )

    def reset(self) -> None:
        """Clear transient state for a new execution; storage is kept."""
        self.stack = Stack()
        self.memory = Memory()
        self.instruction = 1
        self.gas_remaining = _GAS_CEILING
        self.gas_used = _BASE_GAS
        self.events = []
        self.returndata = ""
        self.exitcode = _RUNNING
        self.started_at = time.perf_counter()

    def execute(self) -> ExecutionResult:
        """Run until the code ends, exits or produces return data."""
        while len(self.bytecode) >= self.instruction * 2 + 2:
            self.step()
            if self.exitcode != _RUNNING or self.returndata:
                break
        return ExecutionResult(
            gas_used=self.gas_used,
            gas_remaining=self.gas_remaining,
            returndata=self.returndata,
            exitcode=self.exitcode,
            events=list(self.events),
            runtime=time.perf_counter() - self.started_at,
            instruction=self.instruction,
        )

    def call(self, calldata: str, value: int) -> ExecutionResult:
        """Reset the machine and execute it with the given calldata and value."""
        self.reset()
        self.calldata = calldata.replace("0x", "")
        self.value = value
        return self.execute()