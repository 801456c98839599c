"""Keypad state and next-key callback tests."""

import pytest

from chip8emu.chip8.keyboard import Chip8Keyboard
from chip8emu.errors import KeyWaitPendingError


def test_press_and_release() -> None:
    keyboard = Chip8Keyboard()
    keyboard.press(0xA)
    assert keyboard.is_key_pressed(0xA) is True
    assert keyboard.get_pressed_keys() == [0xA]

    keyboard.release(0xA)
    assert keyboard.is_key_pressed(0xA) is False
    assert keyboard.get_pressed_keys() == []


def test_out_of_range_query_is_false() -> None:
    keyboard = Chip8Keyboard()
    assert keyboard.is_key_pressed(0x10) is False
    assert keyboard.is_key_pressed(0xFF) is False


@pytest.mark.parametrize("key", [-1, 16])
def test_out_of_range_press_rejected(key: int) -> None:
    keyboard = Chip8Keyboard()
    with pytest.raises(ValueError):
        keyboard.press(key)
    with pytest.raises(ValueError):
        keyboard.release(key)


def test_next_key_callback_fires_once() -> None:
    keyboard = Chip8Keyboard()
    received = []
    keyboard.register_next_key_callback(received.append)
    assert keyboard.waiting_for_key is True

    keyboard.press(0x3)
    keyboard.press(0x4)
    assert received == [0x3]
    assert keyboard.waiting_for_key is False


def test_release_does_not_resolve_wait() -> None:
    keyboard = Chip8Keyboard()
    received = []
    keyboard.register_next_key_callback(received.append)
    keyboard.release(0x1)
    assert received == []


def test_callback_may_register_another_wait() -> None:
    keyboard = Chip8Keyboard()
    received = []

    def first(key: int) -> None:
        received.append(("first", key))
        keyboard.register_next_key_callback(lambda k: received.append(("second", k)))

    keyboard.register_next_key_callback(first)
    keyboard.press(0x1)
    keyboard.press(0x2)
    assert received == [("first", 0x1), ("second", 0x2)]


def test_second_registration_while_pending_fails() -> None:
    keyboard = Chip8Keyboard()
    keyboard.register_next_key_callback(lambda key: None)
    with pytest.raises(KeyWaitPendingError):
        keyboard.register_next_key_callback(lambda key: None)


def test_clear_drops_state_and_pending_wait() -> None:
    keyboard = Chip8Keyboard()
    keyboard.press(0x5)
    keyboard.register_next_key_callback(lambda key: None)
    keyboard.clear()
    assert keyboard.get_pressed_keys() == []
    assert keyboard.waiting_for_key is False
