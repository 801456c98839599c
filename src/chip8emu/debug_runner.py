"""Headless runner for CHIP-8 ROM debugging workflows."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence, Tuple

from chip8emu.chip8.computer import Chip8Computer
from chip8emu.constants import LOAD_PROGRAM_ADDRESS, MEMORY_SIZE
from chip8emu.cpu.disassembler import disassemble_program
from chip8emu.errors import Chip8Error
from chip8emu.memory import Memory

DEFAULT_MAX_TICKS = 100_000
ADDRESS_MASK = MEMORY_SIZE - 1
BYTES_PER_ROW = 16

EXIT_OK = 0
EXIT_LOAD_FAILED = 1
EXIT_TICK_LIMIT = 2
EXIT_TIME_LIMIT = 3
EXIT_FATAL = 4
EXIT_FAULT = 5

# Half-open ``(start, stop)`` address window.
Window = Tuple[int, int]


@dataclass
class RunResult:
    executed: int = 0
    ticks: int = 0
    break_hit: bool = False
    timeout_hit: bool = False
    tick_limit_hit: bool = False
    fault_hit: bool = False


def _parse_hex(text: str, *, limit: int = ADDRESS_MASK) -> int:
    value = int(text.strip(), 16)
    if not 0 <= value <= limit:
        raise ValueError(f"0x{value:X} is outside 0x0-0x{limit:X}")
    return value


def _parse_window(text: str) -> Window:
    """Parse an inclusive ``START:END`` hex range into a window."""

    first, sep, last = text.partition(":")
    if not sep:
        raise ValueError("expected START:END")
    start, end = _parse_hex(first), _parse_hex(last)
    if end < start:
        raise ValueError("END is below START")
    return start, end + 1


def _coalesce(windows: Sequence[Window]) -> List[Window]:
    merged: List[Window] = []
    for start, stop in sorted(windows):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], stop))
        else:
            merged.append((start, stop))
    return merged


def _dump_windows(memory: Memory, requested: Sequence[Window]) -> List[Window]:
    """Requested windows, or the loaded program when none were given."""

    if requested:
        return _coalesce(requested)
    region = memory.program_region
    if region is None:
        return [(LOAD_PROGRAM_ADDRESS, memory.size)]
    return [region]


def _hex_rows(memory: Memory, window: Window) -> Iterator[str]:
    start, stop = window
    data = memory.slice(start, stop)
    for offset in range(0, len(data), BYTES_PER_ROW):
        row = data[offset:offset + BYTES_PER_ROW]
        yield f"{start + offset:03X}: " + " ".join(f"{value:02X}" for value in row)


def _write_dump(memory: Memory, requested: Sequence[Window], *, target: Path | None, fmt: str) -> None:
    windows = _dump_windows(memory, requested)
    if fmt == "bin":
        payload = b"".join(memory.slice(start, stop) for start, stop in windows)
        if target is None:
            sys.stdout.buffer.write(payload)
        else:
            target.write_bytes(payload)
        return

    text = "\n".join(row for window in windows for row in _hex_rows(memory, window))
    if target is None:
        print(text)
    else:
        target.write_text(text + "\n")

def _format_registers(computer: Chip8Computer) -> str:
    state = computer.registers.snapshot()
    v = state["v"]
    lines = [
        " ".join(f"V{index:X}={value:02X}" for index, value in enumerate(v[:8])),
        " ".join(f"V{index:X}={value:02X}" for index, value in enumerate(v[8:], start=8)),
        (
            f"PC={state['pc']:03X} I={state['i']:03X} SP={state['sp']} "
            f"DT={state['delay_timer']:02X} ST={state['sound_timer']:02X} "
            f"PAUSED={'yes' if state['paused'] else 'no'}"
        ),
    ]
    stack = state["stack"]
    if stack:
        lines.append("STACK " + " ".join(f"{value:03X}" for value in stack))
    return "\n".join(lines)


def _format_listing(data: bytes) -> str:
    return "\n".join(
        f"{address:03X}: {opcode:04X}  {text}"
        for address, opcode, text in disassemble_program(data, LOAD_PROGRAM_ADDRESS)
    )


def _repress(computer: Chip8Computer, key: int) -> None:
    """Release and press a held key so a pending key wait sees a fresh press."""

    computer.keyboard.release(key)
    computer.keyboard.press(key)


def _execute_program(
    computer: Chip8Computer,
    *,
    max_ticks: int | None,
    breakpoints: Sequence[int],
    max_seconds: float | None,
    stop_on_fault: bool,
    held_keys: Sequence[int] = (),
) -> RunResult:
    result = RunResult()
    break_set = {value & ADDRESS_MASK for value in breakpoints}
    deadline: float | None = None
    if max_seconds is not None and max_seconds >= 0:
        deadline = time.monotonic() + max_seconds

    while max_ticks is None or result.ticks < max_ticks:
        if held_keys and computer.keyboard.waiting_for_key:
            _repress(computer, held_keys[0])
        faults_before = len(computer.faults)
        result.executed += computer.step()
        result.ticks += 1
        if stop_on_fault and len(computer.faults) > faults_before:
            result.fault_hit = True
            break
        if break_set and computer.registers.pc in break_set:
            result.break_hit = True
            break
        if deadline is not None and time.monotonic() >= deadline:
            result.timeout_hit = True
            break
    else:
        result.tick_limit_hit = True

    return result


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8emu-debug",
        description="Headless CHIP-8 runner for ROM diagnostics.",
    )
    parser.add_argument("--rom", type=str, required=True, help="ROM image to load at 0x200")
    parser.add_argument(
        "--ticks",
        type=int,
        default=DEFAULT_MAX_TICKS,
        help="Maximum ticks to run (0 or negative disables the limit)",
    )
    parser.add_argument(
        "--break-pc",
        action="append",
        default=[],
        help="Break when PC reaches the given hex address (repeatable)",
    )
    parser.add_argument(
        "--press-key",
        action="append",
        default=[],
        help=(
            "Hold the given hex key (0-F) down for the whole run (repeatable); "
            "the first one is pressed again whenever the ROM waits for a key"
        ),
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the RND instruction")
    parser.add_argument(
        "--seconds",
        type=float,
        default=None,
        help="Maximum wall-clock seconds to run before dumping",
    )
    parser.add_argument(
        "--stop-on-fault",
        action="store_true",
        help="Stop at the first invalid or out-of-program fetch",
    )
    parser.add_argument("--disassemble", action="store_true", help="Print a listing of the ROM and exit")
    parser.add_argument("--registers", action="store_true", help="Print the register file after the run")
    parser.add_argument("--screen", action="store_true", help="Print the framebuffer as text after the run")
    parser.add_argument(
        "--dump",
        type=str,
        default=None,
        help="File path for memory dump (defaults to stdout)",
    )
    parser.add_argument(
        "--dump-range",
        action="append",
        default=[],
        help="Memory range to dump in START:END hex form (inclusive, repeatable); defaults to the loaded program",
    )
    parser.add_argument(
        "--dump-format",
        choices=("hex", "bin", "none"),
        default="none",
        help="Dump format (hex table, raw binary, or no dump)",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity (DEBUG traces every instruction)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    breakpoints: List[int] = []
    for spec in args.break_pc:
        try:
            breakpoints.append(_parse_hex(spec))
        except ValueError as exc:
            parser.error(f"invalid breakpoint address '{spec}': {exc}")

    keys: List[int] = []
    for spec in args.press_key:
        try:
            keys.append(_parse_hex(spec, limit=0xF))
        except ValueError as exc:
            parser.error(f"invalid key '{spec}': {exc}")

    dump_windows: List[Window] = []
    for spec in args.dump_range:
        try:
            dump_windows.append(_parse_window(spec))
        except ValueError as exc:
            parser.error(f"invalid dump range '{spec}': {exc}")

    computer = Chip8Computer(rng=random.Random(args.seed))
    try:
        data = computer.load_rom_file(args.rom)
    except Chip8Error as exc:
        print(f"Failed to load ROM: {exc}", file=sys.stderr)
        return EXIT_LOAD_FAILED

    if args.disassemble:
        print(_format_listing(data))
        return EXIT_OK

    for key in keys:
        computer.keyboard.press(key)

    tick_limit = args.ticks if args.ticks > 0 else None
    try:
        result = _execute_program(
            computer,
            max_ticks=tick_limit,
            breakpoints=breakpoints,
            max_seconds=args.seconds,
            stop_on_fault=args.stop_on_fault,
            held_keys=keys,
        )
    except Chip8Error as exc:
        print(f"Emulation halted: {exc}", file=sys.stderr)
        print(_format_registers(computer), file=sys.stderr)
        return EXIT_FATAL

    if args.registers:
        print(_format_registers(computer))
    if args.screen:
        print(computer.display.render_text())
    if args.dump_format != "none":
        dump_target = Path(args.dump) if args.dump is not None else None
        _write_dump(computer.memory, dump_windows, target=dump_target, fmt=args.dump_format)

    if result.break_hit:
        return EXIT_OK
    if result.fault_hit:
        fault = computer.cpu.last_fault
        detail = f"{fault.message} at 0x{fault.address:03X}" if fault is not None else "fault"
        print(f"Execution stopped: {detail}", file=sys.stderr)
        return EXIT_FAULT
    if result.timeout_hit:
        print("Execution stopped: time limit reached", file=sys.stderr)
        return EXIT_TIME_LIMIT
    if result.tick_limit_hit:
        print("Execution stopped: tick limit reached", file=sys.stderr)
        return EXIT_TICK_LIMIT
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
