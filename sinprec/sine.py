"""
Reference and candidate sines of a float32 phase.

The reference is mpmath's sine at the run's working precision. Candidates are
computed at four native precision tiers and lifted into the working context
without any additional rounding.
"""
from enum import Enum

import mpmath
import numpy as np
from numpy_quaddtype import QuadPrecDType

from .hexfloat import mpf_to_hex, parse_hex

DEFAULT_PRECISION_BITS = 512
# binary128 significand, hidden bit included
QUAD_PRECISION_BITS = 113

# SLEEF is binary128 everywhere; the "longdouble" backend is binary128 only on some platforms.
QUAD_BACKEND = "sleef"
_QUAD_DTYPE = QuadPrecDType(backend=QUAD_BACKEND)


def make_context(precision_bits: int = DEFAULT_PRECISION_BITS) -> mpmath.MPContext:
    """Private mpmath context so that nothing else can change the working precision."""
    if int(precision_bits) < QUAD_PRECISION_BITS:
        raise ValueError(
            f"precision_bits must be at least {QUAD_PRECISION_BITS} to lift binary128 exactly, got {precision_bits}"
        )
    ctx = mpmath.MPContext()
    ctx.prec = int(precision_bits)
    return ctx


_QUAD_CTX = make_context(QUAD_PRECISION_BITS)


def reference_sine(ctx: mpmath.MPContext, phase: np.float32):
    return ctx.sin(ctx.convert(np.float32(phase)))


def quad_sine(phase: np.float32) -> np.ndarray:
    """sin(phase) in binary128, as a one-element QuadPrecDType array."""
    x = np.asarray([phase], dtype=np.float64).astype(_QUAD_DTYPE)
    return np.sin(x)


def lift_quad(ctx: mpmath.MPContext, q: np.ndarray):
    """
    Exact value of a one-element binary128 array in ``ctx``.

    The 113-bit significand is peeled into three doubles: each cast takes the
    leading bits, and the quad subtraction of that cast is exact, so
    ``q == hi + mid + lo`` with nothing left over.
    """
    hi = q.astype(np.float64)
    rest = q - hi.astype(_QUAD_DTYPE)
    mid = rest.astype(np.float64)
    lo = (rest - mid.astype(_QUAD_DTYPE)).astype(np.float64)
    parts = [ctx.convert(float(v[0])) for v in (hi, mid, lo)]
    return ctx.fadd(ctx.fadd(parts[0], parts[1], exact=True), parts[2], exact=True)


def quad_sine_hex(phase: np.float32) -> str:
    return mpf_to_hex(_QUAD_CTX, lift_quad(_QUAD_CTX, quad_sine(phase)))


class Tier(Enum):
    SINGLE = "float"
    DOUBLE = "double"
    EXTENDED = "long double"
    QUAD = "quad"

    @property
    def label(self) -> str:
        return self.value


def candidate_sine(ctx: mpmath.MPContext, tier: Tier, phase: np.float32):
    phase = np.float32(phase)
    if tier is Tier.SINGLE:
        return ctx.convert(np.sin(phase))
    if tier is Tier.DOUBLE:
        return ctx.convert(np.sin(np.float64(phase)))
    if tier is Tier.EXTENDED:
        return ctx.convert(np.sin(np.longdouble(phase)))
    if tier is Tier.QUAD:
        return parse_hex(ctx, quad_sine_hex(phase))
    raise ValueError(f"Unknown tier: {tier!r}")


__all__ = [
    "Tier",
    "make_context",
    "reference_sine",
    "candidate_sine",
    "quad_sine",
    "quad_sine_hex",
    "lift_quad",
    "DEFAULT_PRECISION_BITS",
    "QUAD_PRECISION_BITS",
    "QUAD_BACKEND",
]
