from enum import Enum
from typing import Callable

import numpy as np

# Bit pattern of 0x1.921fb6p+0, the float32 immediately above pi/2.
GT_PID2_BITS = 0x3FC90FDB
# floor(2**23 * pi/2); k / 2**23 stays below pi/2 for every k under this bound.
PID2_LS23_BOUND = 13176794
FLOAT32_EXPONENT_MASK = 0x7F800000
UINT32_MAX = 0xFFFFFFFF
_TWO_POW_23 = np.float32(1 << 23)


def make_rng(seed: int) -> np.random.Generator:
    """Mersenne Twister stream; the same seed always yields the same phases."""
    return np.random.Generator(np.random.MT19937(seed))


def bits_to_float32(bits) -> np.float32:
    return np.array(bits, dtype=np.uint32).view(np.float32)[()]


def float32_to_bits(x) -> int:
    return int(np.array(x, dtype=np.float32).view(np.uint32)[()])


def draw_non_uniform(rng: np.random.Generator) -> np.float32:
    # Float bit patterns are not evenly spaced in value: denser near zero.
    return bits_to_float32(rng.integers(0, GT_PID2_BITS, dtype=np.uint32))


def draw_uniform(rng: np.random.Generator) -> np.float32:
    # int -> float32 and the division by 2**23 are both exact
    k = rng.integers(0, PID2_LS23_BOUND, dtype=np.uint32)
    return np.float32(k) / _TWO_POW_23


def draw_all_floats(rng: np.random.Generator) -> np.float32:
    while True:
        bits = int(rng.integers(0, UINT32_MAX, dtype=np.uint32, endpoint=True))
        # all-ones exponent is inf or NaN
        if bits & FLOAT32_EXPONENT_MASK != FLOAT32_EXPONENT_MASK:
            return bits_to_float32(bits)


class Distribution(Enum):
    NON_UNIFORM = "+0 <= x < PI/2, non-uniform"
    UNIFORM = "+0 <= x < PI/2, uniform"
    ALL_FLOATS = "all floats"

    @property
    def label(self) -> str:
        return self.value

    def draw(self, rng: np.random.Generator) -> np.float32:
        return _DRAW[self](rng)


_DRAW: dict[Distribution, Callable[[np.random.Generator], np.float32]] = {
    Distribution.NON_UNIFORM: draw_non_uniform,
    Distribution.UNIFORM: draw_uniform,
    Distribution.ALL_FLOATS: draw_all_floats,
}

__all__ = [
    "Distribution",
    "make_rng",
    "draw_non_uniform",
    "draw_uniform",
    "draw_all_floats",
    "bits_to_float32",
    "float32_to_bits",
    "GT_PID2_BITS",
    "PID2_LS23_BOUND",
]
