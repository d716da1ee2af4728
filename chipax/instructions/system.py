"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import DecodedInstruction
from chipax.stack import pop
from chipax.logging import logger


def _report_unknown_opcode(raw, address):
    logger.warning(f"Unknown opcode 0x{int(raw):04X} at 0x{int(address):03X}")


def unknown_opcode(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Report an unrecognised instruction and hold the program counter on it."""
    address = state.pc - 2
    jax.debug.callback(_report_unknown_opcode, instruction.raw, address)
    return state.replace(pc=address, stalled=jnp.array(True))


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine, ignored when the stack is empty."""
    def _pop(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(state.stack.pointer > 0, _pop, lambda state: state, state)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            unknown_opcode,
            state, instruction
        ),
        state, instruction
    )
