"""Benchmark package initialization."""
from .models import (
    BenchmarkConfig, ClientPool, ComparisonEntry, Endpoint, LiveAccumulator, LiveSample,
    RunSummary, ScenarioResult
)
from .constants import BenchmarkConstants
from .exceptions import (
    BenchmarkExecutionError, EndpointConnectionError, ScenarioExecutionError, ScenarioTimeoutError,
    ResultLoadError
)
from .workload_generator import WorkloadGenerator
from .client_pool_manager import ClientPoolManager
from .scenario_runner import ScenarioRunner
from .comparator import Comparator
from .keyspace_cleaner import KeyspaceCleaner
from .result_exporter import ResultExporter
from .visualization_generator import VisualizationGenerator
from .report_renderer import ReportRenderer
from .kv_benchmark import KVBenchmark, ScenarioDefinition
from .live_dashboard import LiveDashboard, update_accumulator
from .runner import BenchmarkRunner

__all__ = [
    'BenchmarkConfig',
    'ClientPool',
    'ComparisonEntry',
    'Endpoint',
    'LiveAccumulator',
    'LiveSample',
    'RunSummary',
    'ScenarioResult',
    'BenchmarkConstants',
    'BenchmarkExecutionError',
    'EndpointConnectionError',
    'ScenarioExecutionError',
    'ScenarioTimeoutError',
    'ResultLoadError',
    'WorkloadGenerator',
    'ClientPoolManager',
    'ScenarioRunner',
    'Comparator',
    'KeyspaceCleaner',
    'ResultExporter',
    'VisualizationGenerator',
    'ReportRenderer',
    'KVBenchmark',
    'ScenarioDefinition',
    'LiveDashboard',
    'update_accumulator',
    'BenchmarkRunner'
]
