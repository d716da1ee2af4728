"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.constants import SCREEN_WIDTH, DISPLAY_SIZE, ADDRESS_MASK

# Pre-computed sprite grid: up to 15 rows of 8 pixels
rows, cols = jnp.meshgrid(jnp.arange(16), jnp.arange(8), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels land at ``(VX + col) + (VY + row) * 64`` in the flat framebuffer,
    so a sprite crossing the right edge continues on the next row; pixels
    past the last cell are dropped. VF is set when any lit pixel is erased.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    addresses = (jnp.astype(state.I, jnp.int32) + rows) & ADDRESS_MASK
    sprite = (jnp.astype(state.memory[addresses], jnp.int32) >> (7 - cols)) & 1

    targets = (sprite_x + cols) + (sprite_y + rows) * SCREEN_WIDTH
    drawn = (sprite == 1) & (rows < instruction.n) & (targets < DISPLAY_SIZE)

    current = state.display[jnp.where(drawn, targets, 0)]
    collision = jnp.any(drawn & (current == 1))

    # Out-of-range indices are dropped by the scatter
    new_display = state.display.at[jnp.where(drawn, targets, DISPLAY_SIZE)].set(
        current ^ 1, mode="drop"
    )

    return state.replace(
        display=new_display,
        V=state.V.at[0xF].set(jnp.astype(collision, jnp.uint8))
    )
