"""CHIP-8 register file: V0-VF, I, PC, call stack and timers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from chip8emu.constants import LOAD_PROGRAM_ADDRESS, NUMBER_OF_REGISTERS, STACK_DEPTH
from chip8emu.errors import StackOverflowError, StackUnderflowError

logger = logging.getLogger(__name__)

STACK_EMPTY = -1


class _ByteRegisters(list):
    """Fixed-length register bank that truncates every store to 8 bits."""

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            raise TypeError("register bank does not support slice assignment")
        super().__setitem__(index, value & 0xFF)


@dataclass
class Registers:
    """Register file matching the CHIP-8 layout."""

    v: List[int] = field(default_factory=lambda: _ByteRegisters([0] * NUMBER_OF_REGISTERS))
    i: int = 0
    pc: int = LOAD_PROGRAM_ADDRESS
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    sp: int = STACK_EMPTY
    delay_timer: int = 0
    sound_timer: int = 0
    paused: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.v, _ByteRegisters):
            self.v = _ByteRegisters(value & 0xFF for value in self.v)

    def reset(self) -> None:
        for index in range(NUMBER_OF_REGISTERS):
            self.v[index] = 0
        self.i = 0
        self.stack = [0] * STACK_DEPTH
        self.sp = STACK_EMPTY
        self.pc = LOAD_PROGRAM_ADDRESS
        self.delay_timer = 0
        self.sound_timer = 0
        self.paused = False

    def advance(self) -> None:
        self.pc = (self.pc + 2) & 0xFFFF

    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH - 1:
            raise StackOverflowError(f"call stack is full ({STACK_DEPTH} entries)")
        self.sp += 1
        self.stack[self.sp] = address & 0xFFFF
        logger.debug("push sp=%d value=0x%03X", self.sp, address)

    def pop(self) -> int:
        if self.sp <= STACK_EMPTY:
            raise StackUnderflowError("call stack is empty")
        value = self.stack[self.sp]
        self.sp -= 1
        logger.debug("pop sp=%d value=0x%03X", self.sp, value)
        return value

    @property
    def stack_depth(self) -> int:
        return self.sp + 1

    def tick_timers(self) -> bool:
        """Decrement both timers; True only when the sound timer just hit zero."""

        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1
            return self.sound_timer == 0
        return False

    def snapshot(self) -> Dict[str, object]:
        return {
            "v": list(self.v),
            "i": self.i,
            "pc": self.pc,
            "sp": self.sp,
            "stack": list(self.stack[: self.sp + 1]),
            "delay_timer": self.delay_timer,
            "sound_timer": self.sound_timer,
            "paused": self.paused,
        }
