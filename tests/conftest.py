"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipax import create_state, SCREEN_WIDTH


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state(seed=0)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def pixel(state, x, y):
    """Read framebuffer cell (x, y)."""
    return int(state.display[x + y * SCREEN_WIDTH])


def program(*instructions):
    """Assemble 16-bit instructions into big-endian ROM bytes."""
    return b"".join(instruction.to_bytes(2, "big") for instruction in instructions)
