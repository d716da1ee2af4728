"""CHIP-8 emulator package."""

from chipax.state import EmulatorState, StackState, create_state
from chipax.emulator import (
    execute, execute_cycle, fetch, tick_timers, run_cycles, load_program, load_rom, LoadError
)
from chipax.decode import DecodedInstruction, decode
from chipax.keypad import KEYPAD_LAYOUT, set_key, apply_key_event
from chipax.constants import *
from chipax.rendering import chip8_display_to_rgb, create_color_scheme, display_to_pixels

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "execute_cycle",
    "tick_timers",
    "run_cycles",
    "load_program",
    "load_rom",
    "LoadError",
    "DecodedInstruction",
    "decode",
    "KEYPAD_LAYOUT",
    "set_key",
    "apply_key_event",
    "MEMORY_SIZE",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "DISPLAY_SIZE",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_pixels",
]
