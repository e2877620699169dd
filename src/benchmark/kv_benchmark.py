"""Main class for running the Redis vs DragonflyDB comparison suite."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, List

from .models import BenchmarkConfig, ComparisonEntry, Endpoint, RunSummary, ScenarioResult
from .constants import BenchmarkConstants
from .client_pool_manager import ClientPoolManager
from .scenario_runner import ScenarioRunner
from .comparator import Comparator
from .keyspace_cleaner import KeyspaceCleaner
from .result_exporter import ResultExporter
from .visualization_generator import VisualizationGenerator


# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScenarioDefinition:
    """A named workload, runnable against any endpoint."""
    name: str
    description: str
    run: Callable[[Endpoint], Awaitable[ScenarioResult]]


def compact_count(value: int) -> str:
    """Render 100000 as ``100K`` for scenario titles."""
    if value >= 1000 and value % 1000 == 0:
        return f"{value // 1000}K"
    return str(value)


class KVBenchmark:
    """Runs every scenario against both endpoints and compares them."""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.pool_manager = ClientPoolManager(config)
        self.scenario_runner = ScenarioRunner(config, self.pool_manager)
        self.comparator = Comparator()
        self.result_exporter = ResultExporter()
        self.visualization_generator = VisualizationGenerator()

    def scenarios(self) -> List[ScenarioDefinition]:
        """Ordered scenario catalogue built from the configuration."""
        cfg = self.config
        runner = self.scenario_runner
        return [
            ScenarioDefinition(
                name=f"{runner.CONCURRENT_SCAN} ({compact_count(cfg.scan_key_count)} keys, {cfg.scan_clients} clients)",
                description=f"Multiple clients scanning {compact_count(cfg.scan_key_count)} keys simultaneously",
                run=lambda ep: runner.concurrent_scan(ep, cfg.scan_clients, cfg.scan_key_count,
                                                      cfg.scan_rounds, cfg.scan_value_size),
            ),
            ScenarioDefinition(
                name=f"{runner.KEYS_PATTERN} ({cfg.keys_clients} clients)",
                description="Concurrent pattern matching on large keyspace",
                run=lambda ep: runner.keys_pattern(ep, cfg.keys_clients, cfg.keys_iterations),
            ),
            ScenarioDefinition(
                name=f"{runner.MEMORY_INFO} ({cfg.info_clients} clients)",
                description="Admin commands under concurrent load",
                run=lambda ep: runner.memory_info(ep, cfg.info_clients, cfg.info_iterations),
            ),
            ScenarioDefinition(
                name=f"{runner.BULK_MSET_MGET} ({cfg.bulk_batch_size} keys/batch)",
                description=f"Large batch operations ({cfg.bulk_batch_size} keys per batch)",
                run=lambda ep: runner.bulk_operations(ep, cfg.bulk_batch_size, cfg.bulk_iterations,
                                                      cfg.bulk_value_size),
            ),
            ScenarioDefinition(
                name=f"{runner.SORTED_SET_QUERIES} ({compact_count(cfg.zset_size)} members)",
                description=f"Complex queries on {compact_count(cfg.zset_size)} member sorted set",
                run=lambda ep: runner.sorted_set_queries(ep, cfg.zset_size, cfg.zset_clients,
                                                         cfg.zset_queries_per_client),
            ),
            ScenarioDefinition(
                name=f"{runner.MIXED_WORKLOAD} ({cfg.mixed_clients} clients)",
                description="Real-world pattern: SET, GET, INCR, LPUSH, HSET",
                run=lambda ep: runner.pipelined_mixed(ep, cfg.mixed_clients, cfg.mixed_pipelines_per_client,
                                                      cfg.mixed_value_size),
            ),
        ]

    async def verify_connectivity(self) -> None:
        """
        Ping both endpoints before any scenario runs.

        Raises:
            EndpointConnectionError: If either endpoint is unreachable.
        """
        for endpoint in self.config.endpoints:
            client = await self.pool_manager.open_client(endpoint)
            await self.pool_manager.close_client(client, endpoint)
            logger.info(f"Connected to {endpoint.label} ({endpoint.address})")

    async def cleanup(self) -> None:
        """Delete every benchmark key on both endpoints."""
        for endpoint in self.config.endpoints:
            client = await self.pool_manager.open_client(endpoint)
            try:
                deleted = await KeyspaceCleaner.cleanup(client, BenchmarkConstants.CLEANUP_PREFIXES)
                logger.info(f"Removed {deleted:,} benchmark keys from {endpoint.label}")
            finally:
                await self.pool_manager.close_client(client, endpoint)

    async def run_comparison(self) -> List[ComparisonEntry]:
        """
        Run each scenario on endpoint A, then endpoint B, then compare.

        Returns:
            Comparison entries in scenario order.
        """
        endpoint_a, endpoint_b = self.config.endpoint_a, self.config.endpoint_b
        entries = []
        for number, scenario in enumerate(self.scenarios(), start=1):
            logger.info(f"TEST {number}: {scenario.name} - {scenario.description}")
            result_a = await scenario.run(endpoint_a)
            result_b = await scenario.run(endpoint_b)
            entries.append(self.comparator.compare(scenario.name, endpoint_a, result_a, endpoint_b, result_b))
        return entries

    def summarize(self, entries: List[ComparisonEntry]) -> RunSummary:
        """Roll the comparison entries up into a run summary."""
        return self.comparator.summarize(self.config.endpoint_a, self.config.endpoint_b, entries)

    def save_results(self, entries: List[ComparisonEntry], output_path: Path) -> None:
        """Save comparison entries to CSV."""
        self.result_exporter.save_results(entries, output_path)

    def load_results(self, input_path: Path) -> List[ComparisonEntry]:
        """Load comparison entries from CSV without contacting any server."""
        return self.result_exporter.load_results(input_path)

    def plot_results(self, entries: List[ComparisonEntry], bench_dir: Path) -> None:
        """Generate and save throughput and speedup graphs."""
        self.visualization_generator.plot_throughput(entries, Path(bench_dir) / BenchmarkConstants.THROUGHPUT_GRAPH)
        self.visualization_generator.plot_speedups(entries, Path(bench_dir) / BenchmarkConstants.SPEEDUP_GRAPH)
