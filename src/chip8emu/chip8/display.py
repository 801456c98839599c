"""CHIP-8 monochrome framebuffer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from chip8emu.constants import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH

Color = Tuple[int, int, int]


def parse_color(value: str | Color) -> Color:
    """Accept ``#RGB``/``#RRGGBB`` strings or RGB tuples."""

    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ValueError(f"invalid colour: {value!r}")
        number = int(text, 16)
        return ((number >> 16) & 0xFF, (number >> 8) & 0xFF, number & 0xFF)
    red, green, blue = value
    return (red & 0xFF, green & 0xFF, blue & 0xFF)


@dataclass
class Chip8Display:
    """Logical 64x32 pixel grid; sprites are XOR-drawn and wrap at the edges."""

    WIDTH: int = DISPLAY_WIDTH
    HEIGHT: int = DISPLAY_HEIGHT

    foreground: Color = (0xFF, 0xFF, 0xFF)
    background: Color = (0x00, 0x00, 0x00)
    pixels: List[List[int]] = field(default_factory=lambda: [[0] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)])
    dirty: bool = True

    def clear(self) -> None:
        for row in self.pixels:
            row[:] = [0] * self.WIDTH
        self.dirty = True

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR ``sprite`` at (x, y); an empty sprite clears the screen.

        Returns True if any lit pixel was switched off.
        """

        if len(sprite) == 0:
            self.clear()
            return False

        collision = False
        for row, byte in enumerate(sprite):
            py = (y + row) % self.HEIGHT
            line = self.pixels[py]
            for col in range(SPRITE_WIDTH):
                if not (byte >> (7 - col)) & 0x01:
                    continue
                px = (x + col) % self.WIDTH
                if line[px]:
                    collision = True
                line[px] ^= 1
        self.dirty = True
        return collision

    def get_pixel(self, x: int, y: int) -> int:
        return self.pixels[y % self.HEIGHT][x % self.WIDTH]

    def lit_pixel_count(self) -> int:
        return sum(sum(row) for row in self.pixels)

    def set_foreground_color(self, color: str | Color) -> None:
        self.foreground = parse_color(color)
        self.dirty = True

    def set_background_color(self, color: str | Color) -> None:
        self.background = parse_color(color)
        self.dirty = True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_pixels(self) -> List[List[Color]]:
        palette = (self.background, self.foreground)
        return [[palette[value] for value in row] for row in self.pixels]

    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if value else off for value in row) for row in self.pixels)

    def render_pygame_surface(self, scaling: int = 1):
        """Render the framebuffer into a pygame Surface.

        Parameters
        ----------
        scaling:
            Integer scale factor applied to both axes.

        Returns
        -------
        pygame.Surface
            RGB surface representing the current screen.

        Raises
        ------
        RuntimeError
            If pygame is not available.
        """

        if scaling <= 0:
            raise ValueError("scaling factor must be positive")

        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for render_pygame_surface") from exc

        surface = pygame.Surface((self.WIDTH * scaling, self.HEIGHT * scaling))
        surface.fill(self.background)
        surface.lock()
        try:
            for y, row in enumerate(self.pixels):
                for x, value in enumerate(row):
                    if value:
                        surface.fill(self.foreground, (x * scaling, y * scaling, scaling, scaling))
        finally:
            surface.unlock()
        self.dirty = False
        return surface
