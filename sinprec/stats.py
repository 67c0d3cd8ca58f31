"""
Streaming statistics of relative differences, evaluated in arbitrary precision.

Sample counts run into the hundreds of millions and the tracked quantities sit
near machine epsilon, so the accumulator uses Welford's single-pass recurrence
with every operation carried out in the run's mpmath context.
"""
from dataclasses import dataclass
from typing import Any

import mpmath

from .phase import Distribution
from .sine import Tier


def relative_difference(ctx: mpmath.MPContext, value, reference):
    """
    (value - reference) / |reference| with IEEE-754 semantics at a zero reference.

    mpmath raises ZeroDivisionError on x/0; here 0/0 and NaN/0 give NaN and any
    other x/0 gives an infinity carrying the sign of x. Such samples are kept.
    """
    diff = ctx.convert(value) - reference
    denom = abs(reference)
    if denom == 0:
        if diff == 0 or ctx.isnan(diff):
            return ctx.nan
        return ctx.inf if diff > 0 else -ctx.inf
    return diff / denom


@dataclass(frozen=True)
class StatsSnapshot:
    distribution: Distribution
    tier: Tier
    n: int
    mean: Any
    variance: Any
    stddev: Any


class StatsAccumulator:
    def __init__(self, distribution: Distribution, tier: Tier, ctx: mpmath.MPContext):
        self.distribution = distribution
        self.tier = tier
        self.ctx = ctx
        self.n = 0
        self.mean = ctx.zero
        self.m2 = ctx.zero
        self._released = False

    def add(self, x) -> None:
        if self._released:
            raise RuntimeError(f"Accumulator {self.distribution.label!r}/{self.tier.label!r} has been released")
        ctx = self.ctx
        x = ctx.convert(x)
        self.n += 1
        delta = x - self.mean
        self.mean = self.mean + delta / self.n
        delta2 = x - self.mean
        # m2 + delta*delta2 with a single rounding
        self.m2 = ctx.fadd(self.m2, ctx.fmul(delta, delta2, exact=True))

    def add_sample(self, value, reference) -> None:
        self.add(relative_difference(self.ctx, value, reference))

    def snapshot(self) -> StatsSnapshot:
        if self._released:
            raise RuntimeError(f"Accumulator {self.distribution.label!r}/{self.tier.label!r} has been released")
        ctx = self.ctx
        if self.n > 1:
            variance = self.m2 / (self.n - 1)
            stddev = ctx.sqrt(variance)
        else:
            # undefined with fewer than two samples
            variance = ctx.nan
            stddev = ctx.nan
        return StatsSnapshot(
            distribution=self.distribution,
            tier=self.tier,
            n=self.n,
            mean=self.mean,
            variance=variance,
            stddev=stddev,
        )

    def release(self) -> None:
        self.mean = None
        self.m2 = None
        self._released = True

    def __repr__(self) -> str:
        return f"StatsAccumulator({self.distribution.label!r}, {self.tier.label!r}, n={self.n})"


__all__ = ["relative_difference", "StatsAccumulator", "StatsSnapshot"]
