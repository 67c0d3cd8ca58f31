import sys
from typing import Dict, List, Optional, TextIO, Tuple

import numpy as np

from sinprec.tools.helpers import measure_time
from sinprec.tools.run_logger import RunLogger

from .config import RunConfig
from .control import ControlRequests
from .env import record_env
from .phase import Distribution, make_rng
from .report import print_report, write_snapshot_artifacts
from .sine import Tier, candidate_sine, make_context, reference_sine
from .stats import StatsAccumulator, StatsSnapshot, relative_difference

logger = RunLogger


class SinePrecisionRunner:
    """
    Drives the sampling loop over every (distribution, generator) pair.

    Each round draws one phase per distribution and computes its reference sine
    once; all four tiers are compared against that same phase and reference.
    """

    def __init__(self, cfg: RunConfig, *, out: Optional[TextIO] = None, control: Optional[ControlRequests] = None):
        self.cfg = cfg
        self.out = out if out is not None else sys.stdout
        self.control = control if control is not None else ControlRequests()
        self.ctx = make_context(cfg.precision_bits)
        self.rng: np.random.Generator = make_rng(cfg.seed)
        self.rounds = 0
        self.prints = 0
        self.accumulators: Dict[Tuple[Distribution, Tier], StatsAccumulator] = {
            (d, t): StatsAccumulator(d, t, self.ctx) for d in Distribution for t in Tier
        }
        self.root = cfg.outputs.root
        if self.root:
            record_env(self.root, cfg.precision_bits)
        logger.info(
            f"[sinprec] run_id={cfg.run_id} seed={cfg.seed} precision={cfg.precision_bits} bits "
            f"accumulators={len(self.accumulators)}"
        )

    def run_round(self) -> None:
        for dist in Distribution:
            phase = dist.draw(self.rng)
            ref = reference_sine(self.ctx, phase)
            for tier in Tier:
                y = candidate_sine(self.ctx, tier, phase)
                self.accumulators[(dist, tier)].add(relative_difference(self.ctx, y, ref))
        self.rounds += 1

    def snapshot(self, distribution: Distribution, tier: Tier) -> StatsSnapshot:
        return self.accumulators[(distribution, tier)].snapshot()

    def snapshots(self) -> List[StatsSnapshot]:
        return [self.accumulators[(d, t)].snapshot() for d in Distribution for t in Tier]

    def print_now(self) -> None:
        print_report(self.snapshots(), self.out, self.cfg.report_digits)
        self.prints += 1

    def _done(self) -> bool:
        if self.control.stop_requested:
            return True
        return self.cfg.max_rounds is not None and self.rounds >= self.cfg.max_rounds

    def run(self) -> List[StatsSnapshot]:
        cfg = self.cfg
        log_every = cfg.log_every_rounds
        with measure_time() as elapsed:
            while not self._done():
                self.run_round()
                if self.control.consume_print():
                    logger.info(f"[sinprec] print requested after {self.rounds} rounds")
                    self.print_now()
                elif cfg.print_every_rounds and self.rounds % cfg.print_every_rounds == 0:
                    self.print_now()
                if log_every and self.rounds % log_every == 0:
                    secs = elapsed()
                    rate = self.rounds / secs if secs > 0 else float("inf")
                    logger.info(f"[sinprec] rounds={self.rounds} elapsed={secs:.1f}s rate={rate:.1f} rounds/s")
            total = elapsed()
        reason = "stop requested" if self.control.stop_requested else "round limit reached"
        logger.info(f"[sinprec] finished after {self.rounds} rounds in {total:.3f}s ({reason})")
        return self.shutdown()

    def shutdown(self) -> List[StatsSnapshot]:
        final = self.snapshots()
        print_report(final, self.out, self.cfg.report_digits)
        if self.root:
            paths = write_snapshot_artifacts(self.root, final, csv=self.cfg.outputs.write_csv)
            logger.info(f"[sinprec] wrote {', '.join(paths)}")
        for acc in self.accumulators.values():
            acc.release()
        return final


__all__ = ["SinePrecisionRunner"]
