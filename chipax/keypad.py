"""CHIP-8 keypad input.

The hex keypad is laid out on the left block of a QWERTY keyboard::

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F
"""

import jax.numpy as jnp
from chipax.state import EmulatorState

KEYPAD_LAYOUT = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Mark keypad key 0x0-0xF as pressed or released."""
    return state.replace(keypad=state.keypad.at[key & 0xF].set(jnp.bool_(pressed)))


def apply_key_event(state: EmulatorState, key_name: str, pressed: bool) -> EmulatorState:
    """Apply a host key transition; keys outside the layout are ignored."""
    key = KEYPAD_LAYOUT.get(key_name.lower())
    if key is None:
        return state
    return set_key(state, key, pressed)
