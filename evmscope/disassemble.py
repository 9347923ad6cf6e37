"""Disassembly of EVM bytecode into a plain instruction listing."""

from __future__ import annotations

import argparse
import json
import logging
import time
import urllib.error
import urllib.request
from pathlib import Path

from .constants import ADDRESS_REGEX, BYTECODE_REGEX
from .opcodes import opcode

logger = logging.getLogger(__name__)


class DisassemblyError(Exception):
    """Raised when a target cannot be loaded or disassembled."""


def _disassemble(bytecode: str) -> tuple[str, int]:
    chunks = [bytecode[start:start + 2] for start in range(0, len(bytecode), 2)]
    lines = []
    counter = 0
    while counter < len(chunks):
        operation = opcode(chunks[counter])
        pushed = ""
        if "PUSH" in operation.name:
            count = int(operation.name.removeprefix("PUSH"))
            end = counter + 1 + count
            if end > len(chunks):
                break
            pushed = "".join(chunks[counter + 1:end])
            counter += count
        lines.append(f"{counter} {operation.name} {pushed}\n")
        counter += 1
    return "".join(lines), counter


def disassemble_bytecode(bytecode: str) -> str:
    """Return the instruction listing for a hex bytecode string."""
    return _disassemble(bytecode)[0]


def _fetch_code(address: str, rpc_url: str) -> str:
    if not ADDRESS_REGEX.search(address):
        raise DisassemblyError(f"failed to parse address '{address}' .")
    if not address.startswith("0x"):
        address = "0x" + address
    payload = json.dumps(
        {"jsonrpc": "2.0", "method": "eth_getCode", "params": [address, "latest"], "id": 1}
    ).encode()
    try:
        request = urllib.request.Request(
            rpc_url, data=payload, headers={"Content-Type": "application/json"}
        )
    except ValueError as exc:
        raise DisassemblyError(f"failed to connect to RPC provider '{rpc_url}' .") from exc
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            reply = json.loads(response.read())
    except (urllib.error.URLError, OSError, ValueError) as exc:
        raise DisassemblyError(f"failed to fetch bytecode from '{address}' .") from exc
    result = reply.get("result") if isinstance(reply, dict) else None
    if not isinstance(result, str):
        raise DisassemblyError(f"failed to fetch bytecode from '{address}' .")
    return result.replace("0x", "", 1)


def load_bytecode(target: str, rpc_url: str = "") -> str:
    """Resolve a target (address, bytecode or file path) to hex bytecode."""
    if ADDRESS_REGEX.search(target):
        if not rpc_url:
            raise DisassemblyError(
                "disassembling an on-chain contract requires an RPC provider."
            )
        return _fetch_code(target, rpc_url)
    if BYTECODE_REGEX.search(target):
        return target
    try:
        contents = Path(target).read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise DisassemblyError(f"failed to open file '{target}' .") from exc
    if BYTECODE_REGEX.search(contents) and len(contents) % 2 == 0:
        return contents.replace("0x", "", 1)
    raise DisassemblyError(f"file '{target}' doesn't contain valid bytecode.")


def disassemble(target: str, output: str = "", rpc_url: str = "") -> str:
    """Disassemble a target, write the results to disk and return the listing."""
    started = time.perf_counter()
    if output:
        output_dir = Path(output)
    else:
        output_dir = Path.cwd() / "output"
        if ADDRESS_REGEX.search(target):
            output_dir = output_dir / target
        elif not BYTECODE_REGEX.search(target):
            output_dir = output_dir / "local"

    bytecode = load_bytecode(target, rpc_url)
    listing, counter = _disassemble(bytecode)
    logger.info("disassembled %d bytes successfully.", counter)

    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / "bytecode.evm").write_text(bytecode)
    listing_path = output_dir / "disassembled.asm"
    listing_path.write_text(listing)
    logger.info("wrote disassembled bytecode to '%s' .", listing_path)
    logger.debug(
        "disassembly completed in %d ms.", int((time.perf_counter() - started) * 1000)
    )
    return listing


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="evmscope-disassemble", description="Disassemble EVM bytecode to Assembly"
    )
    parser.add_argument(
        "target", help="a file, bytecode or contract address to disassemble"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="increase output verbosity")
    parser.add_argument("-o", "--output", default="",
                        help="directory to write the disassembled bytecode to")
    parser.add_argument("-r", "--rpc-url", default="",
                        help="RPC provider used to fetch on-chain bytecode")
    parser.add_argument("-d", "--default", action="store_true",
                        help="when prompted, always select the default value")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose >= 2 else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    try:
        disassemble(args.target, args.output, args.rpc_url)
    except (DisassemblyError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0