"""CHIP-8 ALU operations (8xxx).

Every operation takes (VX, VY, VF) and returns the new (VX, VF). VF is
written before VX, so 8FYn keeps the arithmetic result rather than the flag.
"""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.instructions.system import unknown_opcode


def _flag(condition) -> jnp.ndarray:
    return jnp.astype(condition, jnp.uint8)


def alu_set(vx, vy, vf):
    """8XY0 - Set: VX = VY."""
    return vy, vf


def alu_or(vx, vy, vf):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, vf


def alu_and(vx, vy, vf):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, vf


def alu_xor(vx, vy, vf):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, vf


def alu_add(vx, vy, vf):
    """8XY4 - Add: VX += VY, set carry flag."""
    total = jnp.astype(vx, jnp.uint16) + jnp.astype(vy, jnp.uint16)
    return jnp.astype(total & 0xFF, jnp.uint8), _flag(total > 0xFF)


def alu_sub_xy(vx, vy, vf):
    """8XY5 - Subtract: VX -= VY, VF = VX > VY."""
    return vx - vy, _flag(vx > vy)


def alu_shift_right(vx, vy, vf):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy, vf):
    """8XY7 - Subtract: VX = VY - VX, VF = VY > VX."""
    return vy - vx, _flag(vy > vx)


def alu_shift_left(vx, vy, vf):
    """8XYE - Shift left: VX <<= 1, VF = shifted out bit."""
    return vx << 1, (vx >> 7) & 1


ALU_OPERATIONS = [
    alu_set, alu_or, alu_and, alu_xor, alu_add,
    alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left,
]

# Low nibble -> index into ALU_OPERATIONS; only 0-7 and E are defined
VALID_ALU_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)
ALU_INDEX = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 0, 0, 0, 0, 0, 0, 8, 0], dtype=jnp.int32)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    vf = state.V[0xF]

    def apply(state):
        result, flag = jax.lax.switch(ALU_INDEX[instruction.n], ALU_OPERATIONS, vx, vy, vf)
        new_V = state.V.at[0xF].set(jnp.astype(flag, jnp.uint8))
        new_V = new_V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
        return state.replace(V=new_V)

    return jax.lax.cond(
        VALID_ALU_OPS[instruction.n],
        apply,
        lambda state: unknown_opcode(state, instruction),
        state
    )
