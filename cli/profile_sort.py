"""Sort profiling CLI

Runs the orderkit profiling harness over a synthetic user dataset and
reports per-strategy timings, key-extractor call counts and peak memory.

Exit code 0 when all strategies produced the same ordering, 1 when they
disagree and 2 for invalid arguments.

Example:
  python -m cli.profile_sort --size 5000 --repeat 5 --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict

from orderkit.config import settings
from orderkit.profiling import run_sort_profiling


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Profile Order comparator vs DSU sorting")
    p.add_argument("--size", type=int, default=settings.PROFILE_SIZE, help="Number of synthetic rows")
    p.add_argument("--seed", type=int, default=settings.PROFILE_SEED, help="Dataset seed")
    p.add_argument(
        "--repeat", type=int, default=settings.PROFILE_REPEAT, help="Timed runs per strategy"
    )
    p.add_argument("--json", action="store_true", help="Emit JSON instead of human-readable text")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.size < 0 or args.repeat < 1:
        print("--size must be >= 0 and --repeat >= 1", file=sys.stderr)
        return 2
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    result = run_sort_profiling(size=args.size, seed=args.seed, repeat=args.repeat)
    if args.json:
        print(json.dumps(asdict(result), indent=2))
    else:
        print(f"Dataset: {result.dataset}")
        for name, seconds in result.durations.items():
            print(
                f"  {name:<12} {seconds * 1000.0:9.2f} ms"
                f"  key calls: {result.key_calls[name]:>8}"
                f"  peak: {result.peak_memory_bytes[name]:>9} B"
            )
        if result.dsu_speedup_ratio is not None:
            print(f"DSU speedup vs comparator: {result.dsu_speedup_ratio:.2f}x")
        print(f"Results agree: {result.results_agree}")
    return 0 if result.results_agree else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
