"""
Report records for the accumulators.

One human-readable block per (distribution, generator) pair, printed on request
and at shutdown, plus machine-readable artifacts written at shutdown.
"""
import os
from typing import Any, Dict, Iterable, List, TextIO

from .io_utils import write_csv, write_jsonl
from .stats import StatsSnapshot


def format_number(value, digits: int = 10) -> str:
    """Scientific notation with ``digits`` digits after the point, e.g. ``-1.2345678901e-8``."""
    ctx = value.context
    if ctx.isnan(value):
        return "nan"
    if ctx.isinf(value):
        return "+inf" if value > 0 else "-inf"
    if value == 0:
        return "0." + "0" * digits + "e+0"
    return ctx.nstr(value, digits + 1, strip_zeros=False, min_fixed=0, max_fixed=0, show_zero_exponent=True)


def full_precision(value) -> str:
    ctx = value.context
    if ctx.isnan(value) or ctx.isinf(value):
        return format_number(value)
    return ctx.nstr(value, ctx.dps, min_fixed=0, max_fixed=0)


def format_record(snap: StatsSnapshot, digits: int = 10) -> str:
    lines = [
        f'#   Distribution: "{snap.distribution.label}"   Generator: "{snap.tier.label}"',
        f"Samples: {snap.n}",
        f"Relative difference mean: {format_number(snap.mean, digits)}",
        f"Relative difference variance: {format_number(snap.variance, digits)}",
        f"Relative difference standard deviation: {format_number(snap.stddev, digits)}",
    ]
    return "\n".join(lines) + "\n\n"


def print_report(snapshots: Iterable[StatsSnapshot], fh: TextIO, digits: int = 10) -> None:
    for snap in snapshots:
        fh.write(format_record(snap, digits))
    fh.flush()


def snapshot_rows(snapshots: Iterable[StatsSnapshot]) -> List[Dict[str, Any]]:
    return [
        {
            "distribution": s.distribution.label,
            "generator": s.tier.label,
            "samples": s.n,
            "mean": full_precision(s.mean),
            "variance": full_precision(s.variance),
            "stddev": full_precision(s.stddev),
        }
        for s in snapshots
    ]


def write_snapshot_artifacts(root: str, snapshots: List[StatsSnapshot], *, name: str = "final", csv: bool = True) -> List[str]:
    rows = snapshot_rows(snapshots)
    paths = [os.path.join(root, "snapshots", f"{name}.jsonl")]
    write_jsonl(paths[0], rows)
    if csv:
        paths.append(os.path.join(root, "snapshots", f"{name}.csv"))
        write_csv(paths[1], rows)
    return paths


__all__ = ["format_number", "format_record", "print_report", "snapshot_rows", "write_snapshot_artifacts"]
