"""CHIP-8 emulator state structures."""

import time
from dataclasses import field
from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode

from chipax.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, DISPLAY_SIZE,
    NUM_REGISTERS, NUM_KEYS, STACK_SIZE,
)


class StackState(PyTreeNode):
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is a flat row-major framebuffer (index = x + y * 64) holding
    0/1 bytes. ``beep`` reports whether the last timer step decremented the
    sound timer, ``stalled`` whether the last cycle was held on the same
    instruction (FX0A without a key, or an unknown opcode).
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros(DISPLAY_SIZE, dtype=jnp.uint8))
    stack: StackState = field(default_factory=lambda: StackState())
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    beep: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stalled: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))


def create_state(seed: Optional[int] = None) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        seed: Seed for the random source used by CXNN. Defaults to the
            current wall-clock time.
    """
    if seed is None:
        seed = time.time_ns()
    state = EmulatorState(jax.random.PRNGKey(seed & 0x7FFFFFFF))
    font = jnp.asarray(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))
