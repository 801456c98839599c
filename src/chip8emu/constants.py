"""Machine constants shared by the CHIP-8 core and its peripherals."""

from __future__ import annotations

from typing import Tuple

MEMORY_SIZE = 0x1000
LOAD_PROGRAM_ADDRESS = 0x200

NUMBER_OF_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

NUMBER_OF_KEYS = 16

SPRITE_SET_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5

# Hex digit glyphs 0-F, five rows each, left-aligned in the high nibble.
FONT_SPRITES: Tuple[int, ...] = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)

__all__ = [
    "MEMORY_SIZE",
    "LOAD_PROGRAM_ADDRESS",
    "NUMBER_OF_REGISTERS",
    "FLAG_REGISTER",
    "STACK_DEPTH",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "SPRITE_WIDTH",
    "NUMBER_OF_KEYS",
    "SPRITE_SET_ADDRESS",
    "FONT_GLYPH_SIZE",
    "FONT_SPRITES",
]
