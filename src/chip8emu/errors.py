"""Exception types raised by the emulator.

Everything here is fatal for the operation that raised it: the CPU never
catches these, so they reach whichever application is driving the ticks.
Recoverable decode problems are reported as :class:`chip8emu.cpu.cpu.Fault`
values instead.
"""

from __future__ import annotations


class Chip8Error(RuntimeError):
    """Base class for emulator failures."""


class MemoryAccessError(Chip8Error):
    """Raised when an address falls outside the memory array."""

    def __init__(self, address: int, size: int) -> None:
        super().__init__(f"memory access out of bounds at 0x{address:X} (size 0x{size:X})")
        self.address = address
        self.size = size


class ProgramTooLargeError(Chip8Error):
    """Raised when a program does not fit above the load address."""

    def __init__(self, length: int, capacity: int) -> None:
        super().__init__(f"program of {length} bytes exceeds available memory ({capacity} bytes)")
        self.length = length
        self.capacity = capacity


class StackOverflowError(Chip8Error):
    """Raised when pushing onto a full call stack."""


class StackUnderflowError(Chip8Error):
    """Raised when popping from an empty call stack."""


class KeyWaitPendingError(Chip8Error):
    """Raised when a next-key callback is registered while another is pending."""


class ProgramLoadError(Chip8Error):
    """Raised when a ROM image cannot be read."""


__all__ = [
    "Chip8Error",
    "MemoryAccessError",
    "ProgramTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
    "KeyWaitPendingError",
    "ProgramLoadError",
]
