"""Capability bundle handed to every operation handler."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable

from chip8emu.cpu.registers import Registers
from chip8emu.memory import Addressable

KeyCallback = Callable[[int], None]


def _system_random_byte() -> int:
    return random.randint(0, 0xFF)


@dataclass
class ExecutionContext:
    """View over the machine: state plus the peripheral hooks the CPU may call.

    ``draw_sprite`` receives an empty sprite to request a screen clear and
    returns True when any lit pixel was switched off. ``wait_for_key``
    registers a callback that the keyboard invokes once on the next press.
    ``decrement_timers`` runs after every executed instruction.
    """

    registers: Registers
    memory: Addressable
    draw_sprite: Callable[[int, int, bytes], bool]
    is_key_pressed: Callable[[int], bool]
    wait_for_key: Callable[[KeyCallback], None]
    decrement_timers: Callable[[], None]
    random_byte: Callable[[], int] = field(default=_system_random_byte)


__all__ = ["ExecutionContext", "KeyCallback"]
