"""CHIP-8 machine wiring: memory, CPU and peripherals behind one object."""

from __future__ import annotations

import logging
import os
import random
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from chip8emu.chip8.display import Chip8Display
from chip8emu.chip8.hardware import Chip8Hardware
from chip8emu.chip8.keyboard import Chip8Keyboard
from chip8emu.chip8.sound import Chip8SoundProcessor
from chip8emu.cpu.context import ExecutionContext
from chip8emu.cpu.cpu import CPU, Diagnostic
from chip8emu.cpu.registers import Registers
from chip8emu.errors import ProgramLoadError
from chip8emu.memory import Memory

logger = logging.getLogger(__name__)

DEFAULT_CYCLES_PER_FRAME = 10

FrameCallback = Callable[["Chip8Computer", int], None]


class Chip8Computer:
    """Concrete CHIP-8 machine.

    The caller drives time: :meth:`run_frame` executes ``cycles_per_frame``
    ticks and then notifies frame listeners. Memory and CPU are owned by the
    instance; nothing is shared between machines.
    """

    STATUS_RUNNING = 0
    STATUS_PAUSED = 1
    STATUS_STOPPED = 2

    def __init__(
        self,
        *,
        cycles_per_frame: int = DEFAULT_CYCLES_PER_FRAME,
        enable_audio: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        if cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be positive")
        self.cycles_per_frame = cycles_per_frame
        self.hardware = Chip8Hardware(
            memory=Memory(),
            display=Chip8Display(),
            keyboard=Chip8Keyboard(),
            sound_processor=Chip8SoundProcessor(enable_audio=enable_audio),
        )
        self.cpu = CPU(on_fault=self._record_fault)
        self._rng = rng if rng is not None else random.Random()
        self.faults: List[Diagnostic] = []
        self.program: bytes = b""
        self.program_path: Optional[Path] = None
        self.frame_count: int = 0
        self._frame_callbacks: List[FrameCallback] = []
        self._running_status: int = self.STATUS_STOPPED
        self.ctx = ExecutionContext(
            registers=self.cpu.registers,
            memory=self.hardware.memory,
            draw_sprite=self.hardware.display.draw_sprite,
            is_key_pressed=self.hardware.keyboard.is_key_pressed,
            wait_for_key=self.hardware.keyboard.register_next_key_callback,
            decrement_timers=self._on_timer_tick,
            random_byte=lambda: self._rng.randint(0, 0xFF),
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def memory(self) -> Memory:
        return self.hardware.memory

    @property
    def registers(self) -> Registers:
        return self.cpu.registers

    @property
    def display(self) -> Chip8Display:
        return self.hardware.display

    @property
    def keyboard(self) -> Chip8Keyboard:
        return self.hardware.keyboard

    @property
    def sound_processor(self) -> Chip8SoundProcessor:
        return self.hardware.sound_processor

    # ------------------------------------------------------------------
    # Program loading
    # ------------------------------------------------------------------
    def load_rom(self, data: Iterable[int]) -> None:
        """Reset the machine and copy ``data`` to the program load address."""

        payload = bytes(data)
        self.memory.reset()
        self.cpu.reset()
        self.display.clear()
        self.keyboard.clear()
        self.sound_processor.set_line_off()
        self.faults.clear()
        self.memory.load_program(payload)
        self.program = payload
        self.frame_count = 0
        if self._running_status == self.STATUS_STOPPED:
            self._running_status = self.STATUS_RUNNING
        logger.info("loaded %d byte ROM", len(payload))

    def load_rom_file(self, path: str | os.PathLike[str]) -> bytes:
        file_path = Path(path)
        try:
            data = file_path.read_bytes()
        except OSError as exc:
            raise ProgramLoadError(f"cannot read ROM {file_path}: {exc}") from exc
        if not data:
            raise ProgramLoadError(f"ROM {file_path} is empty")
        self.load_rom(data)
        self.program_path = file_path
        return data

    def reset(self) -> None:
        """Reload the current program from scratch."""

        path = self.program_path
        self.load_rom(self.program)
        self.program_path = path

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def step(self) -> int:
        executed = self.cpu.tick(self.ctx)
        if executed and self.registers.sound_timer > 0:
            self.sound_processor.set_line_on()
        return executed

    def run_frame(self, cycles: Optional[int] = None) -> int:
        if self._running_status != self.STATUS_RUNNING:
            return 0
        budget = self.cycles_per_frame if cycles is None else cycles
        executed = 0
        for _ in range(budget):
            executed += self.step()
        self.frame_count += 1
        for callback in list(self._frame_callbacks):
            callback(self, executed)
        return executed

    def on_frame_finished(self, callback: FrameCallback) -> None:
        self._frame_callbacks.append(callback)

    def _on_timer_tick(self) -> None:
        if self.registers.tick_timers():
            self.sound_processor.set_line_off()

    def _record_fault(self, diagnostic: Diagnostic) -> None:
        self.faults.append(diagnostic)

    # ------------------------------------------------------------------
    # Control lifecycle
    # ------------------------------------------------------------------
    def get_running_status(self) -> int:
        return self._running_status

    def pause(self) -> None:
        if self._running_status == self.STATUS_RUNNING:
            self._running_status = self.STATUS_PAUSED
            self.sound_processor.set_line_off()

    def resume(self) -> None:
        if self._running_status == self.STATUS_PAUSED:
            self._running_status = self.STATUS_RUNNING

    def power_off(self) -> None:
        self._running_status = self.STATUS_STOPPED
        self.sound_processor.set_line_off()
