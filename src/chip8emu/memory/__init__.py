"""Bounds-checked byte memory backing the CHIP-8 core."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Tuple

from chip8emu.constants import (
    FONT_SPRITES,
    LOAD_PROGRAM_ADDRESS,
    MEMORY_SIZE,
    SPRITE_SET_ADDRESS,
)
from chip8emu.errors import MemoryAccessError, ProgramTooLargeError

logger = logging.getLogger(__name__)


class Addressable(Protocol):
    """Protocol describing the byte store seen by operation handlers."""

    def read(self, address: int) -> int:
        ...

    def write(self, address: int, value: int) -> None:
        ...

    def slice(self, start: int, end: int) -> bytes:
        ...

    def read_opcode(self, address: int) -> int:
        ...

    def is_address_in_program(self, address: int) -> bool:
        ...


class Memory(Addressable):
    """Flat memory with a font table at the bottom and a tracked program region."""

    size: int
    data: bytearray

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= LOAD_PROGRAM_ADDRESS:
            raise ValueError("memory must extend past the program load address")
        self.size = size
        self.data = bytearray(size)
        self._program_length: int = 0
        self.reset()

    def _check(self, address: int) -> None:
        if not (0 <= address < self.size):
            raise MemoryAccessError(address, self.size)

    def read(self, address: int) -> int:
        self._check(address)
        return self.data[address]

    def write(self, address: int, value: int) -> None:
        self._check(address)
        self.data[address] = value & 0xFF

    def slice(self, start: int, end: int) -> bytes:
        """Return a copy of ``[start, end)``; the whole range must be mapped."""

        if end < start:
            raise ValueError("slice end must be >= start")
        self._check(start)
        if end > self.size:
            raise MemoryAccessError(end - 1, self.size)
        return bytes(self.data[start:end])

    def read_opcode(self, address: int) -> int:
        if not self.is_address_in_program(address):
            logger.warning("opcode fetch at 0x%03X is outside the loaded program, returning 0x0000", address)
            return 0x0000
        return (self.read(address) << 8) | self.read(address + 1)

    def reset(self) -> None:
        self.data[:] = bytes(self.size)
        end = SPRITE_SET_ADDRESS + len(FONT_SPRITES)
        self.data[SPRITE_SET_ADDRESS:end] = bytes(FONT_SPRITES)
        self._program_length = 0

    def load_program(self, program: Iterable[int]) -> None:
        payload = bytes(program)
        capacity = self.size - LOAD_PROGRAM_ADDRESS
        if len(payload) > capacity:
            raise ProgramTooLargeError(len(payload), capacity)
        self.data[LOAD_PROGRAM_ADDRESS:LOAD_PROGRAM_ADDRESS + len(payload)] = payload
        self._program_length = len(payload)
        logger.debug("loaded %d byte program at 0x%03X", len(payload), LOAD_PROGRAM_ADDRESS)

    @property
    def program_region(self) -> Optional[Tuple[int, int]]:
        """Half-open ``(start, end)`` range of the last program, if any."""

        if self._program_length == 0:
            return None
        return (LOAD_PROGRAM_ADDRESS, LOAD_PROGRAM_ADDRESS + self._program_length)

    def is_address_in_program(self, address: int) -> bool:
        return LOAD_PROGRAM_ADDRESS <= address < LOAD_PROGRAM_ADDRESS + self._program_length


__all__ = [
    "Addressable",
    "Memory",
]
