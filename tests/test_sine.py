import math

import numpy as np
import pytest
from numpy_quaddtype import QuadPrecDType

import sinprec.sine as sine
from sinprec.hexfloat import parse_hex
from sinprec.sine import (
    QUAD_PRECISION_BITS,
    Tier,
    candidate_sine,
    lift_quad,
    make_context,
    quad_sine_hex,
    reference_sine,
)
from sinprec.stats import relative_difference

PHASES = [np.float32(v) for v in (1e-3, 0.1, 0.5, 1.0, 1.5)]

# loose per-tier bounds on |relative difference|; libm quality varies by platform
TIER_BOUNDS = {
    Tier.SINGLE: 2.0**-21,
    Tier.DOUBLE: 2.0**-50,
    Tier.EXTENDED: 2.0**-50,
    Tier.QUAD: 2.0**-109,
}

QUAD = QuadPrecDType(backend="sleef")


def _quad_sum(*doubles):
    """Exact binary128 sum of doubles whose total fits in 113 bits."""
    acc = np.asarray([0.0]).astype(QUAD)
    for d in doubles:
        acc = acc + np.asarray([d]).astype(QUAD)
    return acc


@pytest.fixture(scope="module")
def ctx():
    return make_context(512)


def test_context_is_private():
    a = make_context(512)
    b = make_context(1024)
    assert a.prec == 512
    assert b.prec == 1024
    assert a.prec == 512


def test_context_rejects_precision_below_binary128():
    with pytest.raises(ValueError):
        make_context(QUAD_PRECISION_BITS - 1)
    assert make_context(QUAD_PRECISION_BITS).prec == QUAD_PRECISION_BITS


def test_reference_uses_the_exact_phase(ctx):
    x = np.float32(0.1)
    # float32(0.1) is not 0.1; the reference must see the float32 value
    assert reference_sine(ctx, x) == ctx.sin(ctx.mpf(float(x)))
    assert reference_sine(ctx, x) != ctx.sin(ctx.mpf("0.1"))


@pytest.mark.parametrize("tier", list(Tier))
@pytest.mark.parametrize("phase", PHASES)
def test_candidates_are_close_to_reference(ctx, tier, phase):
    ref = reference_sine(ctx, phase)
    rd = relative_difference(ctx, candidate_sine(ctx, tier, phase), ref)
    assert abs(rd) <= TIER_BOUNDS[tier]


def test_single_and_double_are_lifted_exactly(ctx):
    x = np.float32(0.75)
    assert candidate_sine(ctx, Tier.SINGLE, x) == ctx.mpf(float(np.sin(x)))
    assert candidate_sine(ctx, Tier.DOUBLE, x) == ctx.mpf(float(np.sin(np.float64(x))))


def test_extended_keeps_every_significand_bit(ctx):
    nbits = int(np.finfo(np.longdouble).nmant) + 1
    wider_than_double = 0
    for x in PHASES:
        y = np.sin(np.longdouble(x))
        m, e = np.frexp(y)
        expected = ctx.mpf((int(np.ldexp(m, nbits)), int(e) - nbits))
        lifted = candidate_sine(ctx, Tier.EXTENDED, x)
        assert lifted == expected
        if np.longdouble(float(y)) != y:
            # not a double: rounding through float64 would lose bits
            assert lifted != ctx.mpf(float(y))
            wider_than_double += 1
    if nbits > 53:
        assert wider_than_double > 0


@pytest.mark.parametrize(
    "doubles",
    [
        (1.0, 2.0**-112),
        (0.5, 2.0**-60, 2.0**-113),
        (-0.75, -(2.0**-100)),
        (2.0**-140, 2.0**-252),
        (0.0,),
    ],
)
def test_lift_quad_is_exact(ctx, doubles):
    q = _quad_sum(*doubles)
    expected = ctx.zero
    for d in doubles:
        expected = ctx.fadd(expected, d, exact=True)
    lifted = lift_quad(ctx, q)
    assert lifted == expected
    if len(doubles) > 1:
        assert lifted != ctx.mpf(sum(doubles))


def test_quad_tier_is_the_binary128_sine(ctx):
    q113 = make_context(QUAD_PRECISION_BITS)
    for x in PHASES:
        direct = np.sin(np.asarray([float(x)]).astype(QUAD))
        y = candidate_sine(ctx, Tier.QUAD, x)
        assert y == lift_quad(ctx, direct)
        # representable in binary128
        assert q113.mpf(y) == y


def test_quad_tier_reads_the_quad_sine(ctx, monkeypatch):
    fixed = _quad_sum(0.5, 2.0**-113)
    monkeypatch.setattr(sine, "quad_sine", lambda phase: fixed)
    y = candidate_sine(ctx, Tier.QUAD, np.float32(1.0))
    assert y == ctx.fadd(0.5, 2.0**-113, exact=True)


def test_quad_hex_fits_binary128(ctx):
    for x in PHASES:
        text = quad_sine_hex(x)
        assert text.startswith("0x1.")
        mantissa = text.split("p")[0][len("0x1."):]
        assert len(mantissa) <= 28
        direct = np.sin(np.asarray([float(x)]).astype(QUAD))
        assert parse_hex(ctx, text) == lift_quad(ctx, direct)


def test_quad_of_zero_and_negative():
    assert quad_sine_hex(np.float32(0.0)) == "0x0p+0"
    assert quad_sine_hex(np.float32(-0.5)).startswith("-0x1.")


def test_tiny_phase_sine_is_the_phase(ctx):
    x = np.float32(1e-30)
    for tier in Tier:
        y = candidate_sine(ctx, tier, x)
        assert abs(relative_difference(ctx, y, reference_sine(ctx, x))) <= TIER_BOUNDS[tier]
    assert math.isclose(float(reference_sine(ctx, x)), float(x), rel_tol=1e-15)


def test_tier_labels():
    assert [t.label for t in Tier] == ["float", "double", "long double", "quad"]
