#!/usr/bin/env python3
"""Batch benchmark: runs every scenario against both servers and prints the comparison."""

import argparse
import sys

from src.benchmark import BenchmarkConfig, BenchmarkRunner, BenchmarkExecutionError, EndpointConnectionError
from src.shared.config import Config
from src.shared.logging import LoggingManager


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Redis vs DragonflyDB benchmark suite")
    parser.add_argument("--no-export", action="store_true", help="Skip writing CSV and PNG files")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Abort a scenario that runs longer than this many seconds")
    parser.add_argument("--log-level", default=None, help="Logging level (default from config)")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Config()
    LoggingManager.setup_logging(args.log_level)

    overrides = {}
    if args.timeout is not None:
        overrides["scenario_timeout"] = args.timeout
    config = BenchmarkConfig.from_settings(settings, **overrides)

    runner = BenchmarkRunner(config, bench_dir=settings.bench_dir, export=not args.no_export)
    try:
        runner.run()
    except EndpointConnectionError as e:
        print(f"\n{e}")
        print("Make sure both databases are running:")
        print("   docker compose up -d\n")
        return 1
    except BenchmarkExecutionError as e:
        print(f"\n{e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
