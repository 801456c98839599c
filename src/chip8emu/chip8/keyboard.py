"""CHIP-8 hexadecimal keypad."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from chip8emu.constants import NUMBER_OF_KEYS
from chip8emu.errors import KeyWaitPendingError

logger = logging.getLogger(__name__)

KeyCallback = Callable[[int], None]


@dataclass
class Chip8Keyboard:
    """Sixteen-key pad state plus a single pending next-key callback.

    The callback slot is one-shot: it is cleared before being invoked on the
    next press, and registering while one is pending is an error.
    """

    _pressed: List[bool] = field(default_factory=lambda: [False] * NUMBER_OF_KEYS)
    _next_key_callback: Optional[KeyCallback] = None

    @staticmethod
    def _check_key(key: int) -> None:
        if not (0 <= key < NUMBER_OF_KEYS):
            raise ValueError(f"key out of range: {key}")

    def is_key_pressed(self, key: int) -> bool:
        # VX may hold any byte; only 0-F name a key.
        if not (0 <= key < NUMBER_OF_KEYS):
            return False
        return self._pressed[key]

    def press(self, key: int) -> None:
        self._check_key(key)
        self._pressed[key] = True
        callback = self._next_key_callback
        if callback is not None:
            self._next_key_callback = None
            logger.debug("key 0x%X resolves pending key wait", key)
            callback(key)

    def release(self, key: int) -> None:
        self._check_key(key)
        self._pressed[key] = False

    def register_next_key_callback(self, callback: KeyCallback) -> None:
        if self._next_key_callback is not None:
            raise KeyWaitPendingError("a next-key callback is already pending")
        self._next_key_callback = callback

    @property
    def waiting_for_key(self) -> bool:
        return self._next_key_callback is not None

    def get_pressed_keys(self) -> List[int]:
        return [key for key, pressed in enumerate(self._pressed) if pressed]

    def clear(self) -> None:
        self._pressed = [False] * NUMBER_OF_KEYS
        self._next_key_callback = None
