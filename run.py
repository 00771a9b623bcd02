"""Entry point for the cache hierarchy simulator.

Usage:
    python run.py                          # 100 random accesses, all three strategies
    python run.py -n 500 --pattern all     # sequential, random and repeated patterns
    python run.py --trace -n 20            # print every access as it is resolved
    python run.py --config cfg.json --csv results.csv --pdf results.pdf
"""
import argparse
import json
import logging
import sys

from memsim.core.config import CacheConfig
from memsim.core.errors import SimulationError
from memsim.data.stats_export import Exporter, export_chart_json, export_chart_pdf, export_comparison_pdf
from memsim.simulation import Simulation
from memsim.simulation.report import format_comparison, format_hit_summary, format_outcome
from memsim.simulation.simulation import PATTERNS


def _non_negative(value):
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Two-level cache hierarchy simulator")
    p.add_argument("-n", "--accesses", type=int, default=100, help="Number of memory accesses to simulate")
    p.add_argument("--pattern", choices=PATTERNS + ('all',), default='random')
    p.add_argument("--seed", type=int, default=None, help="Seed for random address generation")
    p.add_argument("--config", type=str, default=None, help="JSON file overriding the default geometry/costs")
    p.add_argument("--trace", action="store_true", help="Print each access outcome")
    p.add_argument("--hits", type=_non_negative, default=0, help="Show the first N hits of each strategy")
    p.add_argument("--csv", type=str, default=None, help="Write per-strategy statistics to CSV")
    p.add_argument("--json", type=str, default=None, help="Write hit-rate history and statistics to JSON")
    p.add_argument("--pdf", type=str, default=None, help="Write a comparison chart to PDF")
    p.add_argument("-v", "--verbose", action="count", default=0)
    return p.parse_args(argv)


def load_config(path):
    if not path:
        return CacheConfig()
    with open(path, "r", encoding="utf-8") as f:
        return CacheConfig.from_dict(json.load(f))


def main(argv=None):
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
        simulation = Simulation(config)
    except (OSError, ValueError, SimulationError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    callback = None
    if args.trace:
        counters = {}

        def callback(strategy, outcome):
            counters[strategy] = counters.get(strategy, 0) + 1
            print(f"[{strategy.label}] " + format_outcome(counters[strategy], outcome))

    patterns = PATTERNS if args.pattern == 'all' else (args.pattern,)
    last = None
    try:
        for name in patterns:
            result = simulation.run_pattern(name, args.accesses, args.seed, callback)
            print(format_comparison(result, title=f"{name.capitalize()} Pattern Results", pattern=name))
            print()
            if args.hits:
                for strategy in result:
                    print(f"{strategy.label}:")
                    print(format_hit_summary(result.hit_logs[strategy], config, limit=args.hits))
                    print()
            last = result
    except SimulationError as e:
        print(f"Simulation aborted: {e}", file=sys.stderr)
        return 1

    # exports describe the last pattern that ran
    stats = last.by_label()
    history = {s.label: h for s, h in last.hit_rate_history.items()}
    try:
        if args.csv:
            print('Statistics written to', Exporter.export_stats_csv(args.csv, stats))
        if args.json:
            path = export_chart_json(history, {k: v.as_dict() for k, v in stats.items()}, args.json)
            print('Chart data written to', path)
        if args.pdf:
            print('Chart written to', export_comparison_pdf(stats, args.pdf))
            history_pdf = args.pdf[:-4] + '_history.pdf' if args.pdf.endswith('.pdf') else args.pdf + '_history.pdf'
            print('Hit-rate history written to', export_chart_pdf(history, history_pdf))
    except OSError as e:
        print(f"Export failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
