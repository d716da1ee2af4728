"""Main CHIP-8 emulator execution engine."""

import jax
import jax.lax
import jax.numpy as jnp
from chipax.state import EmulatorState
from chipax.decode import decode
from chipax.constants import PROGRAM_START, MEMORY_SIZE, ADDRESS_MASK
from chipax.logging import fori_loop_with_progress
from chipax.instructions.system import execute_system_instruction
from chipax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipax.instructions.alu import execute_alu_operation
from chipax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipax.instructions.display import execute_display
from chipax.instructions.misc import execute_misc_instruction


class LoadError(Exception):
    """Raised when a program image cannot be loaded into memory."""


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)

    return jax.lax.switch(
        decoded_instruction.opcode,
        [
            execute_system_instruction,
            execute_jump,
            execute_call,
            execute_skip_if_equal_immediate,
            execute_skip_if_not_equal_immediate,
            execute_skip_if_equal_register,
            execute_set,
            execute_add,
            execute_alu_operation,
            execute_skip_if_not_equal_register,
            execute_set_index,
            execute_jump_with_offset,
            execute_random,
            execute_display,
            execute_skip_if_key,
            execute_misc_instruction,
        ],
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    address = state.pc & ADDRESS_MASK
    instruction = _pack_u16(state.memory[address], state.memory[(address + 1) & ADDRESS_MASK])
    return state.replace(pc=state.pc + 2), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, flagging a beep while sound is active."""
    beep = state.sound_timer > 0
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(beep, state.sound_timer - 1, state.sound_timer),
        beep=beep,
    )


def execute_cycle(state: EmulatorState) -> EmulatorState:
    """Run one fetch, decode, execute and timer step.

    The timer step is skipped when the instruction stalled: FX0A with no key
    pressed, or an unknown opcode.
    """
    state = state.replace(beep=jnp.array(False), stalled=jnp.array(False))
    state, instruction = fetch(state)
    state = execute(state, instruction)
    return jax.lax.cond(state.stalled, lambda s: s, tick_timers, state)


def run_cycles(state: EmulatorState, num_cycles: int, show_progress: bool = False) -> EmulatorState:
    """Run a fixed number of cycles in a single compiled loop.

    Keypad input cannot change while the loop runs, so this suits headless
    runs of programs that do not wait on keys.
    """
    def body(i, state):
        return execute_cycle(state)

    if show_progress and num_cycles > 0:
        body = fori_loop_with_progress(num_cycles)(body)

    return jax.lax.fori_loop(0, num_cycles, body, state)


def load_program(state: EmulatorState, data: bytes) -> EmulatorState:
    """Copy a program image into CHIP-8 memory starting at 0x200."""
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(data) > capacity:
        raise LoadError(f"Program is {len(data)} bytes, at most {capacity} fit in memory")
    if not data:
        return state
    rom_array = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise LoadError(f"Cannot read ROM '{filename}': {e}") from e
    return load_program(state, rom_data)
