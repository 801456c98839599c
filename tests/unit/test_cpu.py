"""CPU tick driver: dispatch, pause handling and recoverable faults."""

from __future__ import annotations

import logging
from typing import List

import pytest

from chip8emu.cpu.context import ExecutionContext
from chip8emu.cpu.cpu import CPU, Diagnostic, Fault
from chip8emu.errors import StackOverflowError
from chip8emu.memory import Memory


class DummyMachine:
    def __init__(self, program: bytes) -> None:
        self.faults: List[Diagnostic] = []
        self.cpu = CPU(on_fault=self.faults.append)
        self.memory = Memory()
        self.memory.load_program(program)
        self.cleared = 0
        self.timer_ticks = 0
        self.key_callback = None
        self.ctx = ExecutionContext(
            registers=self.cpu.registers,
            memory=self.memory,
            draw_sprite=self._draw,
            is_key_pressed=lambda key: False,
            wait_for_key=self._wait,
            decrement_timers=self._tick_timers,
            random_byte=lambda: 0x5A,
        )

    def _draw(self, x: int, y: int, sprite: bytes) -> bool:
        if not sprite:
            self.cleared += 1
        return False

    def _wait(self, callback) -> None:
        self.key_callback = callback

    def _tick_timers(self) -> None:
        self.timer_ticks += 1
        self.cpu.registers.tick_timers()

    def tick(self) -> int:
        return self.cpu.tick(self.ctx)


def test_tick_executes_and_advances_pc() -> None:
    machine = DummyMachine(bytes([0x60, 0x05, 0x12, 0x00]))
    assert machine.tick() == 1
    assert machine.cpu.registers.v[0] == 0x05
    assert machine.cpu.registers.pc == 0x202

    assert machine.tick() == 1
    assert machine.cpu.registers.pc == 0x200
    assert machine.cpu.instruction_count == 2
    assert machine.faults == []


def test_skip_instruction_moves_pc_by_four() -> None:
    machine = DummyMachine(bytes([0x30, 0x00, 0x60, 0x01, 0x60, 0x02]))
    machine.tick()
    assert machine.cpu.registers.pc == 0x204
    machine.tick()
    assert machine.cpu.registers.v[0] == 0x02


def test_timers_are_decremented_once_per_executed_instruction() -> None:
    machine = DummyMachine(bytes([0x60, 0x03, 0xF0, 0x15, 0x12, 0x04]))
    machine.tick()
    machine.tick()
    assert machine.cpu.registers.delay_timer == 2
    machine.tick()
    machine.tick()
    assert machine.cpu.registers.delay_timer == 0
    assert machine.timer_ticks == 4


def test_invalid_opcode_only_advances_pc() -> None:
    machine = DummyMachine(bytes([0xFF, 0xFF]))
    before = machine.cpu.registers.snapshot()

    assert machine.tick() == 0
    after = machine.cpu.registers.snapshot()
    assert after["pc"] == 0x202
    after["pc"] = before["pc"]
    assert after == before
    assert machine.timer_ticks == 0
    assert len(machine.faults) == 1
    fault = machine.faults[0]
    assert fault.kind is Fault.INVALID_OPCODE
    assert fault.address == 0x200
    assert fault.opcode == 0xFFFF
    assert machine.cpu.last_fault == fault


def test_execution_continues_after_invalid_opcode() -> None:
    machine = DummyMachine(bytes([0x51, 0x21, 0x60, 0x05]))
    assert machine.tick() == 0
    assert machine.tick() == 1
    assert [fault.kind for fault in machine.faults] == [Fault.INVALID_OPCODE]
    assert machine.cpu.registers.v[0] == 0x05
    assert machine.cpu.registers.pc == 0x204


def test_system_call_is_recognised_but_unimplemented() -> None:
    machine = DummyMachine(bytes([0x01, 0x23, 0x60, 0x05]))
    assert machine.tick() == 0
    assert machine.faults[0].kind is Fault.UNIMPLEMENTED_INSTRUCTION
    assert machine.cpu.registers.pc == 0x202

    assert machine.tick() == 1
    assert machine.cpu.registers.v[0] == 0x05
    assert len(machine.faults) == 1


def test_fetch_outside_program_is_reported(caplog: pytest.LogCaptureFixture) -> None:
    machine = DummyMachine(bytes([0x12, 0x40]))
    machine.tick()
    assert machine.cpu.registers.pc == 0x240

    with caplog.at_level(logging.WARNING):
        assert machine.tick() == 0
    assert machine.faults[-1].kind is Fault.FETCH_OUTSIDE_PROGRAM
    assert machine.faults[-1].opcode == 0x0000
    assert machine.cpu.registers.pc == 0x240
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "left the loaded program" in warnings[0].getMessage()


def test_clear_screen_goes_through_draw_hook() -> None:
    machine = DummyMachine(bytes([0x00, 0xE0]))
    machine.tick()
    assert machine.cleared == 1


def test_paused_cpu_does_nothing_until_key_arrives() -> None:
    machine = DummyMachine(bytes([0xF3, 0x0A, 0x12, 0x02]))
    assert machine.tick() == 1
    assert machine.cpu.paused is True
    pc = machine.cpu.registers.pc

    assert machine.tick() == 0
    assert machine.cpu.registers.pc == pc
    assert machine.timer_ticks == 1

    machine.key_callback(0x7)
    assert machine.cpu.paused is False
    assert machine.cpu.registers.v[3] == 0x7
    assert machine.tick() == 1


def test_call_and_return_resume_after_call_site() -> None:
    # 200: CALL 206 / 202: LD V1, 01 / 204: JP 204 / 206: LD V0, 09 / 208: RET
    program = bytes([0x22, 0x06, 0x61, 0x01, 0x12, 0x04, 0x60, 0x09, 0x00, 0xEE])
    machine = DummyMachine(program)
    for _ in range(4):
        machine.tick()
    registers = machine.cpu.registers
    assert registers.v[0] == 0x09
    assert registers.v[1] == 0x01
    assert registers.pc == 0x204
    assert registers.stack_depth == 0


def test_stack_overflow_propagates() -> None:
    machine = DummyMachine(bytes([0x22, 0x00]))
    for _ in range(16):
        machine.tick()
    with pytest.raises(StackOverflowError):
        machine.tick()


def test_reset_clears_fault_and_counters() -> None:
    machine = DummyMachine(bytes([0xFF, 0xFF]))
    machine.tick()
    machine.cpu.reset()
    assert machine.cpu.last_fault is None
    assert machine.cpu.instruction_count == 0
    assert machine.cpu.registers.pc == 0x200
