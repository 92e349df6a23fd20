import math
from typing import Tuple

MASK_32 = 0xFFFFFFFF
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def to_int32(value: int) -> int:
    """Wraps an arbitrary integer to a signed 32-bit value."""
    value &= MASK_32
    return value - 0x100000000 if value & 0x80000000 else value


def _imul(a: int, b: int) -> int:
    return (a * b) & MASK_32


def mulberry32(state: int) -> Tuple[float, int]:
    """
    Advances a Mulberry32 state by one step.

    Returns a float in [0, 1) and the new state. The arithmetic is carried out
    on unsigned 32-bit patterns so that the stream is identical on every
    platform for a given starting state.
    """
    state = (state + MULBERRY_INCREMENT) & MASK_32
    t = _imul(state ^ (state >> 15), 1 | state)
    t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK_32) ^ t
    return ((t ^ (t >> 14)) & MASK_32) / TWO_POW_32, state


def next_int(state: int, lo: int, hi: int) -> Tuple[int, int]:
    """Draws an integer in [lo, hi] (both inclusive)."""
    value, state = mulberry32(state)
    return math.floor(value * (hi - lo + 1)) + lo, state


class SeededRandom:
    def __init__(self, seed: int):
        self.state = seed & MASK_32

    def next(self) -> float:
        value, self.state = mulberry32(self.state)
        return value

    def next_int(self, lo: int, hi: int) -> int:
        value, self.state = next_int(self.state, lo, hi)
        return value


def get_seeded_rng(seed: int) -> SeededRandom:
    """Returns a new SeededRandom instance seeded with the given integer."""
    return SeededRandom(seed)
