"""Tests for Chip8Display drawing and rendering."""

import pytest

from chip8emu.chip8.display import Chip8Display, parse_color


def test_new_display_is_blank() -> None:
    display = Chip8Display()
    assert display.lit_pixel_count() == 0
    assert len(display.pixels) == 32
    assert all(len(row) == 64 for row in display.pixels)


def test_draw_sprite_sets_pixels_msb_first() -> None:
    display = Chip8Display()
    collision = display.draw_sprite(0, 0, bytes([0b1010_0000]))
    assert collision is False
    assert display.get_pixel(0, 0) == 1
    assert display.get_pixel(1, 0) == 0
    assert display.get_pixel(2, 0) == 1
    assert display.lit_pixel_count() == 2


def test_redraw_erases_and_reports_collision() -> None:
    display = Chip8Display()
    sprite = bytes([0xF0, 0x90, 0xF0])
    display.draw_sprite(10, 5, sprite)
    assert display.lit_pixel_count() == 10

    assert display.draw_sprite(10, 5, sprite) is True
    assert display.lit_pixel_count() == 0


def test_overlap_without_erasing_is_not_a_collision() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, bytes([0x80]))
    assert display.draw_sprite(1, 0, bytes([0x80])) is False


def test_sprite_wraps_around_edges() -> None:
    display = Chip8Display()
    display.draw_sprite(62, 31, bytes([0xF0, 0xF0]))
    assert display.get_pixel(62, 31) == 1
    assert display.get_pixel(63, 31) == 1
    assert display.get_pixel(0, 31) == 1
    assert display.get_pixel(1, 31) == 1
    assert display.get_pixel(0, 0) == 1
    assert display.lit_pixel_count() == 8


def test_coordinates_beyond_screen_wrap() -> None:
    display = Chip8Display()
    display.draw_sprite(64 + 3, 32 + 2, bytes([0x80]))
    assert display.get_pixel(3, 2) == 1


def test_empty_sprite_clears_screen() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, bytes([0xFF] * 8))
    display.dirty = False

    assert display.draw_sprite(5, 5, b"") is False
    assert display.lit_pixel_count() == 0
    assert display.dirty is True


def test_render_pixels_uses_palette() -> None:
    display = Chip8Display()
    display.set_foreground_color("#123456")
    display.set_background_color((1, 2, 3))
    display.draw_sprite(0, 0, bytes([0x80]))

    pixels = display.render_pixels()
    assert pixels[0][0] == (0x12, 0x34, 0x56)
    assert pixels[0][1] == (1, 2, 3)


def test_render_text() -> None:
    display = Chip8Display()
    display.draw_sprite(0, 0, bytes([0xC0]))
    lines = display.render_text().splitlines()
    assert len(lines) == 32
    assert lines[0].startswith("##..")
    assert set(lines[1]) == {"."}


@pytest.mark.parametrize(
    "value, expected",
    [("#fff", (255, 255, 255)), ("00FF80", (0, 255, 128)), ((300, 2, 3), (44, 2, 3))],
)
def test_parse_color(value, expected) -> None:
    assert parse_color(value) == expected


def test_parse_color_rejects_bad_length() -> None:
    with pytest.raises(ValueError):
        parse_color("#12345")
