"""CHIP-8 stack operations.

The pointer wraps modulo the stack size, so deep recursion overwrites the
oldest return addresses instead of faulting.
"""

import jax.numpy as jnp
from chipax.constants import STACK_MASK
from chipax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    new_data = stack.data.at[stack.pointer].set(jnp.astype(address, jnp.uint16))
    return stack.replace(data=new_data, pointer=(stack.pointer + 1) & STACK_MASK)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = (stack.pointer - 1) & STACK_MASK
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
