import argparse
import sys
import time
from datetime import datetime, timezone
from typing import Optional

from sinprec.tools.run_logger import RunLogger

from .config import RunConfig
from .control import ControlRequests, install_signal_handlers
from .runner import SinePrecisionRunner

logger = RunLogger


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Relative error of float/double/long double/quad sine against a high-precision reference",
        epilog="Send SIGHUP to print the accumulators, SIGINT (Ctrl-C) to stop and print the final report.",
    )
    p.add_argument("-cfg", "--config", required=False, help="Path to YAML config. If omitted, defaults are used.")
    p.add_argument("-o", "--out", required=False, default=None, help="Artifacts root directory (overrides outputs.root)")
    p.add_argument("-s", "--seed", type=int, default=None, help="Random seed (overrides seed)")
    p.add_argument("-n", "--rounds", type=int, default=None, help="Stop after this many rounds (overrides max_rounds)")
    p.add_argument("--print-every", type=int, default=None, help="Also print the accumulators every N rounds")
    p.add_argument("overrides", nargs="*", help="Config overrides as key=value, e.g. precision_bits=1024 outputs.write_csv=false")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    cfg = RunConfig.from_yaml(args.config) if args.config else RunConfig()
    cfg.apply_overrides(args.overrides)
    if args.out:
        cfg.outputs.root = args.out
    if args.seed is not None:
        cfg.seed = args.seed
    if args.rounds is not None:
        cfg.max_rounds = args.rounds
    if args.print_every is not None:
        cfg.print_every_rounds = args.print_every
    cfg.__post_init__()
    logger.debug(f"[sinprec] config: {cfg.to_dict()}")

    control = ControlRequests()
    with install_signal_handlers(control):
        runner = SinePrecisionRunner(cfg, out=sys.stdout, control=control)
        runner.run()
    return 0


def cli() -> int:
    start_wall = datetime.now(timezone.utc)
    start_cpu = time.perf_counter()
    print(f"[START] {start_wall.isoformat()}", file=sys.stderr)
    try:
        return main()
    finally:
        end_wall = datetime.now(timezone.utc)
        elapsed_sec = time.perf_counter() - start_cpu
        print(f"[END]   {end_wall.isoformat()}  (elapsed: {elapsed_sec:.3f}s)", file=sys.stderr)


if __name__ == "__main__":
    sys.exit(cli())
