"""CHIP-8 instruction decoding.

Instructions are two bytes, big-endian. The top nibble picks the family and
the remaining nibbles are read as register indices or immediates depending
on the family, so every field is extracted up front and handlers pick what
they need.
"""

from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Nibble fields of one instruction, laid out as ``oxyn``."""
    raw: int
    opcode: int  # o: instruction family
    x: int       # x: first register index
    y: int       # y: second register index
    n: int       # n: 4-bit immediate / sub-operation
    nn: int      # yn: 8-bit immediate
    nnn: int     # xyn: 12-bit address


def decode(instruction: int) -> DecodedInstruction:
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction >> 12) & 0xF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        n=instruction & 0xF,
        nn=instruction & 0xFF,
        nnn=instruction & 0xFFF,
    )
