"""
CHIP-8 emulator host: pygame window, keyboard input and frame pacing
"""

import argparse
import sys

import jax
import numpy as np
import pygame

from chipax import (
    create_state, execute_cycle, run_cycles, load_rom, apply_key_event,
    chip8_display_to_rgb, create_color_scheme, LoadError, SCREEN_WIDTH, SCREEN_HEIGHT,
)
from chipax.logging import logger


def log_registers(state):
    """Log a one-line register summary."""
    registers = " ".join(f"V{i:X}:{int(v):02X}" for i, v in enumerate(np.asarray(state.V)))
    logger.info(f"PC: 0x{int(state.pc):03X} I: 0x{int(state.I):03X} {registers}")


def run_headless(state, num_cycles):
    """Run a fixed number of cycles without a window."""
    state = jax.block_until_ready(run_cycles(state, num_cycles, show_progress=True))
    jax.effects_barrier()
    log_registers(state)
    return state


def run_emulator(state, scale=16, fps=60, color_scheme="white"):
    """Main emulator loop, one cycle per frame"""
    on_color, off_color = create_color_scheme(color_scheme)

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
    pygame.display.set_caption("chipax")
    clock = pygame.time.Clock()

    step = jax.jit(execute_cycle)
    cycle_count = 0
    running = True

    logger.info("Controls: 1234/QWER/ASDF/ZXCV = keypad, ESC = quit")

    try:
        while running:
            clock.tick(fps)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        state = apply_key_event(state, pygame.key.name(event.key), True)
                elif event.type == pygame.KEYUP:
                    state = apply_key_event(state, pygame.key.name(event.key), False)

            state = step(state)
            cycle_count += 1

            if state.beep:
                logger.debug("Beep")

            frame = chip8_display_to_rgb(state.display, scale, on_color, off_color)
            # surfarray expects (width, height, 3)
            surface = pygame.surfarray.make_surface(frame.swapaxes(0, 1))
            screen.blit(surface, (0, 0))
            pygame.display.flip()
    finally:
        pygame.quit()

    logger.info(f"Stopped after {cycle_count} cycles")
    return state


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a CHIP-8 program")
    parser.add_argument("rom", help="Path to the CHIP-8 ROM image")
    parser.add_argument(
        "--scale",
        type=int,
        default=16,
        help="Window upscaling factor (default: 16)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=60,
        help="Frames per second, one cycle per frame (default: 60)",
    )
    parser.add_argument(
        "--color-scheme",
        type=str,
        default="white",
        choices=["white", "classic", "amber", "blue", "retro"],
        help="Display colors (default: white)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for CXNN (default: wall clock)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--cycles",
        type=int,
        default=None,
        help="Run this many cycles headless and print the registers",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger.set_level(args.log_level)

    state = create_state(args.seed)
    try:
        state = load_rom(state, args.rom)
    except LoadError as e:
        logger.error(str(e))
        return 1
    logger.info(f"Loaded: {args.rom}")

    if args.cycles is not None:
        run_headless(state, args.cycles)
    else:
        run_emulator(state, scale=args.scale, fps=args.fps, color_scheme=args.color_scheme)
    return 0


if __name__ == "__main__":
    sys.exit(main())
