#!/usr/bin/env python3
"""Live dashboard: repeats a quick SET benchmark on both servers until 'q' is pressed."""

import argparse

from src.benchmark import BenchmarkConfig, LiveDashboard
from src.shared.config import Config
from src.shared.logging import LoggingManager


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Redis vs DragonflyDB live dashboard")
    parser.add_argument("--interval", type=float, default=None, help="Seconds between iterations")
    args = parser.parse_args()

    settings = Config()
    LoggingManager.setup_logging("WARNING")

    overrides = {}
    if args.interval is not None:
        overrides["live_interval"] = args.interval
    LiveDashboard(BenchmarkConfig.from_settings(settings, **overrides)).run()
