"""Register file behaviour: stack bounds, timers and 8-bit storage."""

from __future__ import annotations

import pytest

from chip8emu.constants import LOAD_PROGRAM_ADDRESS, STACK_DEPTH
from chip8emu.cpu.registers import STACK_EMPTY, Registers
from chip8emu.errors import StackOverflowError, StackUnderflowError


def test_initial_state() -> None:
    registers = Registers()
    assert list(registers.v) == [0] * 16
    assert registers.pc == LOAD_PROGRAM_ADDRESS
    assert registers.sp == STACK_EMPTY
    assert registers.paused is False


def test_v_registers_store_eight_bits() -> None:
    registers = Registers()
    registers.v[3] = 0x1FF
    registers.v[4] += 0x101
    assert registers.v[3] == 0xFF
    assert registers.v[4] == 0x01


def test_advance_moves_pc_by_two() -> None:
    registers = Registers()
    registers.advance()
    registers.advance()
    assert registers.pc == LOAD_PROGRAM_ADDRESS + 4


def test_stack_pops_in_reverse_order() -> None:
    registers = Registers()
    values = [0x200 + 2 * n for n in range(STACK_DEPTH)]
    for value in values:
        registers.push(value)
    assert registers.stack_depth == STACK_DEPTH

    popped = [registers.pop() for _ in range(STACK_DEPTH)]
    assert popped == list(reversed(values))
    assert registers.sp == STACK_EMPTY


def test_push_beyond_capacity_raises() -> None:
    registers = Registers()
    for _ in range(STACK_DEPTH):
        registers.push(0x300)
    with pytest.raises(StackOverflowError):
        registers.push(0x302)
    assert registers.sp == STACK_DEPTH - 1


def test_pop_empty_stack_raises() -> None:
    registers = Registers()
    with pytest.raises(StackUnderflowError):
        registers.pop()
    assert registers.sp == STACK_EMPTY


def test_tick_timers_idle_at_zero() -> None:
    registers = Registers()
    assert registers.tick_timers() is False
    assert registers.delay_timer == 0
    assert registers.sound_timer == 0


def test_tick_timers_reports_sound_edge_once() -> None:
    registers = Registers()
    registers.delay_timer = 3
    registers.sound_timer = 2

    assert registers.tick_timers() is False
    assert (registers.delay_timer, registers.sound_timer) == (2, 1)
    assert registers.tick_timers() is True
    assert (registers.delay_timer, registers.sound_timer) == (1, 0)
    assert registers.tick_timers() is False
    assert registers.delay_timer == 0


def test_reset_restores_power_on_state() -> None:
    registers = Registers()
    registers.v[0xA] = 0x12
    registers.i = 0x345
    registers.push(0x208)
    registers.pc = 0x400
    registers.delay_timer = 9
    registers.sound_timer = 4
    registers.paused = True

    registers.reset()

    assert registers.snapshot() == Registers().snapshot()
