# evmscope

Tools for looking inside EVM contract bytecode:

- a **disassembler** (`evmscope.disassemble`) that turns bytecode into a listing of program counters, opcode names and pushed bytes;
- a **virtual machine** (`evmscope.vm.VM`) that runs bytecode against calldata and records the stack, memory, storage and emitted logs at each step, with every stack value tagged by the operation tree that produced it;
- a **solidifier** (`evmscope.solidity.solidify`) that renders such an operation tree as a Solidity-like expression.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Disassembling from the command line

```
evmscope-disassemble 6080604052
```

The target may be:

- bytecode (hex, with or without `0x`);
- a path to a file holding bytecode (the file must hold an even number of hex characters);
- a contract address (40 hex digits, with or without `0x`), fetched with `eth_getCode` over JSON-RPC. This needs an endpoint:

```
evmscope-disassemble 0x<40 hex digits> --rpc-url http://localhost:8545
```

Options:

- `-o DIR`, `--output DIR`: directory for the results. By default results go to `output/` in the current directory, `output/<address>/` for an address, and `output/local/` for a file.
- `-r URL`, `--rpc-url URL`: the JSON-RPC endpoint used for addresses.
- `-v`: give it twice (`-vv`) for debug messages.
- `-d`, `--default`: accepted; the command never prompts.

Two files are written: `disassembled.asm` with the listing and `bytecode.evm` with the raw bytecode. The command exits with status 1 and logs the reason when the target cannot be loaded.

## Disassembling from Python

```python
from evmscope.disassemble import disassemble_bytecode, load_bytecode, disassemble

print(disassemble_bytecode("6080604052"))
# 1 PUSH1 80
# 3 PUSH1 40
# 4 MSTORE
```

`load_bytecode(target, rpc_url)` resolves a target to hex bytecode, and `disassemble(target, output, rpc_url)` does what the command does and returns the listing. Both raise `DisassemblyError` when the target cannot be loaded. A PUSH whose bytes run past the end of the code stops the listing.

## Running bytecode

```python
from evmscope.vm import VM

vm = VM(
    bytecode="600160020160005260206000f3",
    calldata="",
    address="0x" + "11" * 20,
    origin="0x" + "22" * 20,
    caller="0x" + "33" * 20,
    value=0,
    gas_limit=100_000,
)
result = vm.execute()
print(result.exitcode, result.returndata)
# 0 0000000000000000000000000000000000000000000000000000000000000003
```

- `VM.step()` runs one instruction and returns a `State` with the `Instruction` record (inputs, outputs and their operations) and copies of the stack, memory, storage and events.
- `VM.execute()` runs until the code ends, an exit code is set, or return data appears, and returns an `ExecutionResult`.
- `VM.call(calldata, value)` resets the stack, memory, gas and events (storage is kept) and runs again.

Exit codes: `255` still running, `0` stop or return (also out of gas), `1` revert or invalid instruction, `2` an operand too large to use as an offset or size, `4` an unreadable opcode, `790` a jump to a position that is not a `JUMPDEST`.

Logs are `evmscope.log.Log` values with an index, 64-digit hex topics and hex data.

## Rendering operations

```python
from evmscope.opcodes import WrappedOpcode
from evmscope.solidity import solidify

add = WrappedOpcode.from_code(0x01, [1, 2])
nested = WrappedOpcode.from_code(0x01, [add, 3])
print(solidify(add))     # 0x01 + 0x02
print(solidify(nested))  # (0x01 + 0x02) + 0x03
```

Arithmetic on two pushed constants is folded into a single `PUSH32` of the result, so traced expressions stay short.

## What this package does not do

- The virtual machine is a tracing aid, not a full EVM. Balances, gas price, block values, external code size and calls return fixed placeholder values; `CREATE` and `CREATE2` push fixed addresses; `EXTCODECOPY` and `RETURNDATACOPY` write `ff` bytes; gas is charged at each opcode's minimum cost only.
- Fetched bytecode is not cached; every address target is fetched again.
- There is no lookup of function, error or event signatures and no decompilation into full contracts; `solidify` renders one expression at a time.