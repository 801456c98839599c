"""CHIP-8 fetch/decode/execute driver."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from chip8emu.cpu.context import ExecutionContext
from chip8emu.cpu.disassembler import Disassembler, format_instruction
from chip8emu.cpu.operations import OPERATIONS, Operation
from chip8emu.cpu.registers import Registers

logger = logging.getLogger(__name__)


class Fault(enum.Enum):
    """Recoverable conditions that cost a tick but never raise."""

    INVALID_OPCODE = "invalid-opcode"
    UNIMPLEMENTED_INSTRUCTION = "unimplemented-instruction"
    FETCH_OUTSIDE_PROGRAM = "fetch-outside-program"


@dataclass(frozen=True)
class Diagnostic:
    kind: Fault
    address: int
    opcode: int
    message: str


class CPU:
    """Executes one instruction per :meth:`tick`.

    The CPU is either running or paused; the pause flag lives in the register
    file so that the ``LD Vx, K`` handler and its key callback can flip it.
    Memory and stack errors raised by handlers are not caught here.
    """

    def __init__(
        self,
        *,
        registers: Optional[Registers] = None,
        disassembler: Optional[Disassembler] = None,
        operations: Mapping[str, Operation] = OPERATIONS,
        on_fault: Optional[Callable[[Diagnostic], None]] = None,
    ) -> None:
        self.registers = registers if registers is not None else Registers()
        self.disassembler = disassembler if disassembler is not None else Disassembler()
        self.operations = operations
        self.on_fault = on_fault
        self.last_fault: Optional[Diagnostic] = None
        self.instruction_count: int = 0

    @property
    def paused(self) -> bool:
        return self.registers.paused

    def reset(self) -> None:
        self.registers.reset()
        self.last_fault = None
        self.instruction_count = 0

    def tick(self, ctx: ExecutionContext) -> int:
        """Run one instruction; returns the number executed (0 or 1)."""

        registers = ctx.registers
        if registers.paused:
            return 0

        address = registers.pc
        if not ctx.memory.is_address_in_program(address):
            self._report(Fault.FETCH_OUTSIDE_PROGRAM, address, 0x0000, "program counter left the loaded program")
            return 0

        opcode = ctx.memory.read_opcode(address)
        registers.advance()
        decoded = self.disassembler.disassemble(opcode)
        if decoded.instruction is None:
            self._report(Fault.INVALID_OPCODE, address, opcode, f"invalid opcode 0x{opcode:04X}")
            return 0

        operation = self.operations.get(decoded.instruction.id)
        if operation is None:
            self._report(
                Fault.UNIMPLEMENTED_INSTRUCTION,
                address,
                opcode,
                f"unimplemented instruction {decoded.instruction.id}",
            )
            return 0

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("%03X: %04X  %s", address, opcode, format_instruction(decoded))
        operation(ctx, decoded.args, opcode)
        ctx.decrement_timers()
        self.instruction_count += 1
        return 1

    def _report(self, kind: Fault, address: int, opcode: int, message: str) -> None:
        diagnostic = Diagnostic(kind, address, opcode, message)
        self.last_fault = diagnostic
        logger.warning("%s at 0x%03X (opcode 0x%04X)", message, address, opcode)
        if self.on_fault is not None:
            self.on_fault(diagnostic)


__all__ = ["CPU", "Diagnostic", "Fault"]
