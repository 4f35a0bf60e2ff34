#!/usr/bin/env python3
"""
microbench - Main entry point for running benchmark modules.

Usage:
    python main.py [SOURCE ...] [options]

Sources are benchmark module files (path/to/module.py) or dotted module
names (package.module). Use --bundled to add the bundled benchmarks.
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from microbench.harness import (
    BenchmarkConfig,
    BenchmarkRunner,
    ChartReporter,
    ConfigurationError,
    ConsoleReporter,
    JSONReporter,
    discover,
    parse_overrides,
)
from microbench.instrumentation import MemoryProbe, Tracer, TracingConfig, setup_logger
from microbench.scenarios import CATEGORIES, bundled_sources


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="microbench - run fixed-format micro-benchmark modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python main.py --bundled
    python main.py --bundled numeric --multiplier 2
    python main.py my_bench.py --set iterations=10 --set num_elements=1000
    python main.py --bundled sorting --fresh-fixture --json-out results/
    python main.py my_bench.py --bundled all --table

--bundled takes an optional category, so put sources before it or name the
category explicitly (--bundled all my_bench.py).
        """,
    )

    parser.add_argument(
        "sources",
        nargs="*",
        help="Benchmark module files or dotted module names",
    )
    parser.add_argument(
        "--bundled",
        nargs="?",
        const="all",
        choices=["all", *CATEGORIES],
        help="Add the bundled benchmarks (all, or one category)",
    )
    parser.add_argument(
        "--multiplier",
        type=int,
        default=None,
        help="Global iteration multiplier (default: $MICROBENCH_MULTIPLIER or 1)",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=None,
        help="Untimed run() calls before measuring (default: $MICROBENCH_WARMUP_RUNS or 0)",
    )
    parser.add_argument(
        "--fresh-fixture",
        action="store_true",
        default=None,
        help="Rebuild the fixture with setup() before every iteration, outside timing",
    )
    parser.add_argument(
        "--time-budget",
        type=float,
        default=None,
        help="Per-module wall-clock budget in seconds, checked between iterations",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Override a configuration value returned by init() (repeatable)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Require every module to define setup()",
    )
    parser.add_argument(
        "--json-out",
        type=Path,
        default=None,
        help="Directory to save a JSON copy of the results",
    )
    parser.add_argument(
        "--chart-dir",
        type=Path,
        default=None,
        help="Directory to save duration charts",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable ANSI colors in the report",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        help="Also print a one-row-per-module comparison table",
    )
    parser.add_argument(
        "--no-memory",
        action="store_true",
        help="Do not sample resident memory",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print OpenTelemetry spans for every lifecycle phase",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write DEBUG-level logs to this file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print per-iteration progress",
    )
    return parser


def main(argv=None) -> int:
    # Load environment variables from .env file
    load_dotenv()

    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    setup_logger(
        "microbench",
        level=logging.INFO if args.verbose else logging.WARNING,
        log_file=args.log_file,
    )

    sources = list(args.sources)
    if args.bundled:
        sources.extend(bundled_sources(args.bundled))
    if not sources:
        parser.error("no benchmark sources given (pass files/modules or --bundled)")

    try:
        config = BenchmarkConfig.from_env(
            multiplier=args.multiplier,
            warmup_runs=args.warmup,
            fresh_fixture=args.fresh_fixture,
            time_budget_seconds=args.time_budget,
            overrides=parse_overrides(args.overrides),
            track_memory=not args.no_memory,
            verbose=args.verbose,
        )
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    tracer = Tracer(TracingConfig(enable_console_export=args.trace))
    runner = BenchmarkRunner(
        config=config,
        tracer=tracer,
        memory_probe=MemoryProbe(enabled=config.track_memory),
    )

    suite, load_errors = discover(sources, strict=args.strict)

    try:
        result = runner.run_suite(suite, load_errors)
    except KeyboardInterrupt:
        print("\nBenchmark interrupted by user", file=sys.stderr)
        return 130
    finally:
        tracer.shutdown()

    reporter = ConsoleReporter(use_color=not args.no_color and sys.stdout.isatty())
    print(reporter.render(suite, result.runs, result.load_errors))
    if args.table:
        print()
        print(reporter.comparison_table(result.runs))

    if args.json_out:
        path = JSONReporter(args.json_out).save_suite(result)
        print(f"\nResults saved to {path}")

    if args.chart_dir:
        charts = ChartReporter(args.chart_dir)
        for run in result.runs:
            charts.duration_distribution(run)
        charts.comparison_bar_chart(result.runs)
        print(f"Charts saved to {args.chart_dir}")

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
