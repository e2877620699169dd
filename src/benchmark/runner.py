"""Benchmark runner to orchestrate the execution of benchmarks."""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from .models import BenchmarkConfig, ComparisonEntry, RunSummary
from .constants import BenchmarkConstants
from .kv_benchmark import KVBenchmark
from .report_renderer import ReportRenderer


# Configure logging
logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Orchestrates the execution of benchmarks and manages output."""

    def __init__(self, config: BenchmarkConfig, bench_dir: Union[Path, str] = "bench", export: bool = True):
        self.config = config
        self.bench_dir = Path(bench_dir)
        self.export = export
        self.benchmark = KVBenchmark(config)
        self.renderer = ReportRenderer(config.endpoint_a, config.endpoint_b)
        self.entries: List[ComparisonEntry] = []
        self.summary: Optional[RunSummary] = None

    def run(self) -> RunSummary:
        """Run the complete benchmarking process."""
        try:
            return asyncio.run(self._run())
        except Exception as e:
            logger.error(f"Benchmark failed: {e}")
            raise

    async def _run(self) -> RunSummary:
        print(self.renderer.format_header())
        print()
        print(self.renderer.format_architecture())
        print()

        logger.info("Connecting to databases...")
        await self.benchmark.verify_connectivity()
        await self.benchmark.cleanup()

        logger.info("Running benchmarks...")
        self.entries = await self.benchmark.run_comparison()
        self.summary = self.benchmark.summarize(self.entries)

        self.renderer.render(self.entries, self.summary)
        if self.export:
            self.export_results(self.entries)

        await self.benchmark.cleanup()
        logger.info("Benchmark complete!")
        return self.summary

    def export_results(self, entries: List[ComparisonEntry]) -> None:
        """Write CSV and graphs; failures here never discard the measured entries."""
        try:
            self.bench_dir.mkdir(parents=True, exist_ok=True)
            self.benchmark.save_results(entries, self.bench_dir / BenchmarkConstants.COMPARISON_CSV)
            self.benchmark.plot_results(entries, self.bench_dir)
        except Exception as e:
            logger.error(f"Failed to export results to {self.bench_dir}: {e}")
