#!/usr/bin/env python3
"""
Utility to load benchmark results from CSV and regenerate the report without running tests.
This script loads an existing comparison CSV from the bench directory and re-renders it.
"""
from pathlib import Path
import sys
import logging

from src.benchmark.comparator import Comparator
from src.benchmark.constants import BenchmarkConstants
from src.benchmark.exceptions import ResultLoadError
from src.benchmark.kv_benchmark import KVBenchmark
from src.benchmark.models import BenchmarkConfig
from src.benchmark.report_renderer import ReportRenderer


# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def load_and_visualize_results(bench_path: str = "bench"):
    """
    Load comparison results from CSV and regenerate the terminal report and graphs.

    Args:
        bench_path: Path to the bench directory containing the CSV file.

    Returns:
        List of loaded comparison entries.
    """
    bench_dir = Path(bench_path)
    csv_path = bench_dir / BenchmarkConstants.COMPARISON_CSV

    benchmark = KVBenchmark(BenchmarkConfig())
    entries = benchmark.load_results(csv_path)
    if not entries:
        logger.warning(f"No comparison rows found in {csv_path}")
        return entries

    endpoint_a, endpoint_b = entries[0].endpoint_a, entries[0].endpoint_b
    summary = Comparator.summarize(endpoint_a, endpoint_b, entries)
    ReportRenderer(endpoint_a, endpoint_b).render(entries, summary)
    benchmark.plot_results(entries, bench_dir)
    return entries


if __name__ == "__main__":
    bench_path = sys.argv[1] if len(sys.argv) > 1 else "bench"
    try:
        load_and_visualize_results(bench_path)
    except ResultLoadError as e:
        logger.error(str(e))
        sys.exit(1)
