"""CHIP-8 beeper with optional pygame square-wave playback."""

from __future__ import annotations

import logging
from array import array
from dataclasses import dataclass, field
from typing import List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Chip8SoundProcessor:
    """Square-wave tone that plays while the sound timer is non-zero."""

    history: List[Tuple[str, Tuple[float, ...]]] = field(default_factory=list)
    sample_rate: int = 44100
    frequency: float = 440.0
    volume: float = 0.3
    enable_audio: bool = False

    def __post_init__(self) -> None:
        self._audio_initialized: bool = False
        self._channel = None
        self._sound = None
        self._playing: bool = False

    @property
    def playing(self) -> bool:
        return self._playing

    # ------------------------------------------------------------------
    # Machine callbacks
    # ------------------------------------------------------------------

    def set_line_on(self) -> None:
        if self._playing:
            return
        self.history.append(("set_line_on", tuple()))
        self._playing = True
        if not self._ensure_mixer():
            return
        self._channel.set_volume(self.volume)
        self._channel.play(self._sound, loops=-1)

    def set_line_off(self) -> None:
        if not self._playing:
            return
        self.history.append(("set_line_off", tuple()))
        self._playing = False
        if self._audio_initialized and self._channel is not None:
            self._channel.stop()

    def set_volume(self, volume: float) -> None:
        self.volume = min(max(volume, 0.0), 1.0)
        self.history.append(("set_volume", (self.volume,)))
        if self._audio_initialized and self._channel is not None:
            self._channel.set_volume(self.volume)

    # ------------------------------------------------------------------
    # Audio control helpers
    # ------------------------------------------------------------------

    def _ensure_mixer(self) -> bool:
        if not self.enable_audio:
            return False
        if self._audio_initialized:
            return True
        try:
            import pygame  # type: ignore

            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=self.sample_rate, size=-16, channels=1)
            self._channel = pygame.mixer.Channel(0)
            self._sound = pygame.mixer.Sound(buffer=self._render_period())
            self._audio_initialized = True
        except Exception as exc:
            logger.warning("audio disabled: %s", exc)
            self.enable_audio = False
            self._channel = None
            self._sound = None
            self._audio_initialized = False
        return self._audio_initialized

    def _render_period(self) -> array:
        """One full period of a signed 16-bit square wave, looped by the mixer."""

        samples = max(2, int(self.sample_rate / self.frequency))
        half = samples // 2
        amplitude = 32767
        buffer = array("h", [amplitude] * half + [-amplitude] * (samples - half))
        return buffer
