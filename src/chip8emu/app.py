"""CHIP-8 emulator pygame front end."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Dict, Optional, Sequence

from chip8emu.chip8.computer import DEFAULT_CYCLES_PER_FRAME, Chip8Computer
from chip8emu.chip8.keyboard import Chip8Keyboard
from chip8emu.errors import Chip8Error

BASE_CAPTION = "CHIP-8 Emulator"
ENV_ROM_PATH = "CHIP8EMU_ROM"
DEFAULT_SCALE = 10
DEFAULT_FPS = 60

# pygame key constants for printable keys equal their ord() value.
# Layout follows the COSMAC VIP pad:  1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F
KEY_MAP: Dict[int, int] = {
    ord("1"): 0x1,
    ord("2"): 0x2,
    ord("3"): 0x3,
    ord("4"): 0xC,
    ord("q"): 0x4,
    ord("w"): 0x5,
    ord("e"): 0x6,
    ord("r"): 0xD,
    ord("a"): 0x7,
    ord("s"): 0x8,
    ord("d"): 0x9,
    ord("f"): 0xE,
    ord("z"): 0xA,
    ord("x"): 0x0,
    ord("c"): 0xB,
    ord("v"): 0xF,
}


def _handle_key_event(keyboard: Chip8Keyboard, key: int, pressed: bool) -> bool:
    mapping = KEY_MAP.get(key)
    if mapping is None:
        return False
    if pressed:
        keyboard.press(mapping)
    else:
        keyboard.release(mapping)
    return True


def _build_caption(computer: Chip8Computer) -> str:
    parts = [BASE_CAPTION]
    if computer.program_path is not None:
        parts.append(computer.program_path.name)
    if computer.get_running_status() == computer.STATUS_PAUSED:
        parts.append("Paused")
    elif computer.cpu.paused:
        parts.append("Waiting for key")
    fault = computer.cpu.last_fault
    if fault is not None:
        parts.append(f"{fault.kind.value} @ {fault.address:03X}")
    return " | ".join(parts)


def _pygame_loop(
    computer: Chip8Computer,
    *,
    scale: int,
    fps: int,
) -> int:
    import pygame  # type: ignore

    pygame.init()
    display = computer.display
    screen = pygame.display.set_mode((display.WIDTH * scale, display.HEIGHT * scale))
    caption = _build_caption(computer)
    pygame.display.set_caption(caption)
    clock = pygame.time.Clock()

    running = True
    exit_code = 0
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    continue
                if event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                        continue
                    if event.key == pygame.K_SPACE:
                        if computer.get_running_status() == computer.STATUS_PAUSED:
                            computer.resume()
                        else:
                            computer.pause()
                        continue
                    if event.key == pygame.K_F5:
                        computer.reset()
                        continue
                    _handle_key_event(computer.keyboard, event.key, True)
                elif event.type == pygame.KEYUP:
                    _handle_key_event(computer.keyboard, event.key, False)

            try:
                computer.run_frame()
            except Chip8Error as exc:
                print(f"Emulation halted: {exc}", file=sys.stderr)
                exit_code = 4
                running = False

            if display.dirty:
                screen.blit(display.render_pygame_surface(scale), (0, 0))
                pygame.display.flip()

            new_caption = _build_caption(computer)
            if new_caption != caption:
                caption = new_caption
                pygame.display.set_caption(caption)

            clock.tick(fps)
    finally:
        computer.power_off()
        pygame.quit()
    return exit_code


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8emu", description="CHIP-8 emulator (pygame front end)")
    parser.add_argument(
        "rom",
        nargs="?",
        default=None,
        help=f"ROM image to run (defaults to ${ENV_ROM_PATH})",
    )
    parser.add_argument("--scale", type=int, default=DEFAULT_SCALE, help="Window scale factor")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS, help="Frames per second")
    parser.add_argument(
        "--cycles-per-frame",
        type=int,
        default=DEFAULT_CYCLES_PER_FRAME,
        help="Instructions executed per rendered frame",
    )
    parser.add_argument("--no-audio", action="store_true", help="Disable the beeper")
    parser.add_argument("--foreground", type=str, default="#FFFFFF", help="Pixel colour (#RRGGBB)")
    parser.add_argument("--background", type=str, default="#000000", help="Background colour (#RRGGBB)")
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Logging verbosity",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="[%(levelname)s] %(name)s: %(message)s")

    rom_path = args.rom or os.getenv(ENV_ROM_PATH)
    if not rom_path:
        parser.error(f"no ROM given and ${ENV_ROM_PATH} is not set")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.fps <= 0:
        parser.error("--fps must be positive")
    if args.cycles_per_frame <= 0:
        parser.error("--cycles-per-frame must be positive")

    computer = Chip8Computer(cycles_per_frame=args.cycles_per_frame, enable_audio=not args.no_audio)
    try:
        computer.display.set_foreground_color(args.foreground)
        computer.display.set_background_color(args.background)
    except ValueError as exc:
        parser.error(str(exc))

    try:
        computer.load_rom_file(rom_path)
    except Chip8Error as exc:
        print(f"Failed to load ROM: {exc}", file=sys.stderr)
        return 1

    try:
        import pygame  # type: ignore  # noqa: F401
    except ImportError:
        print("pygame is required for the graphical front end", file=sys.stderr)
        return 1

    return _pygame_loop(computer, scale=args.scale, fps=args.fps)


if __name__ == "__main__":
    raise SystemExit(main())
