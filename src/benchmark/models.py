"""Data models for the benchmarking system."""
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .constants import BenchmarkConstants


@dataclass(frozen=True)
class Endpoint:
    """A key-value server under test."""
    label: str
    host: str
    port: int

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class ClientPool:
    """Connections to one endpoint, owned by a single scenario invocation."""
    endpoint: Endpoint
    clients: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.clients)

    def __iter__(self):
        return iter(self.clients)


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of one scenario against one endpoint."""
    duration: float  # seconds
    total_operations: int
    throughput: float  # operations per second

    @classmethod
    def from_measurement(cls, duration: float, total_operations: int) -> "ScenarioResult":
        """Build a result from the timer reading and the logical operation count."""
        if duration > 0:
            throughput = total_operations / duration
        else:
            throughput = math.inf
        return cls(duration=duration, total_operations=total_operations, throughput=throughput)


@dataclass(frozen=True)
class ComparisonEntry:
    """Head-to-head result of one scenario."""
    scenario_name: str
    endpoint_a: Endpoint
    endpoint_b: Endpoint
    result_a: ScenarioResult
    result_b: ScenarioResult
    winner: str
    speedup_ratio: float

    @property
    def is_tie(self) -> bool:
        return self.result_a.throughput == self.result_b.throughput

    @property
    def loser(self) -> str:
        if self.winner == self.endpoint_a.label:
            return self.endpoint_b.label
        return self.endpoint_a.label


@dataclass(frozen=True)
class RunSummary:
    """Roll-up of every comparison in a run."""
    endpoint_a: Endpoint
    endpoint_b: Endpoint
    wins_a: int
    wins_b: int
    speedups_a: Tuple[float, ...]
    speedups_b: Tuple[float, ...]
    total_scenarios: int

    def wins(self, label: str) -> int:
        return self.wins_a if label == self.endpoint_a.label else self.wins_b

    def speedups(self, label: str) -> Tuple[float, ...]:
        return self.speedups_a if label == self.endpoint_a.label else self.speedups_b

    def mean_speedup(self, label: str) -> Optional[float]:
        values = self.speedups(label)
        if not values:
            return None
        return sum(values) / len(values)

    def max_speedup(self, label: str) -> Optional[float]:
        values = self.speedups(label)
        if not values:
            return None
        return max(values)


@dataclass(frozen=True)
class LiveSample:
    """Throughput of one live-dashboard iteration, in ops/sec."""
    a_ops: float
    b_ops: float


@dataclass(frozen=True)
class LiveAccumulator:
    """Running totals for the live dashboard."""
    iteration: int = 0
    total_a: float = 0.0
    total_b: float = 0.0
    wins_a: int = 0
    wins_b: int = 0
    last: Optional[LiveSample] = None
    iterations: Tuple[int, ...] = ()
    history_a: Tuple[float, ...] = ()
    history_b: Tuple[float, ...] = ()

    @property
    def average_a(self) -> float:
        return self.total_a / self.iteration if self.iteration else 0.0

    @property
    def average_b(self) -> float:
        return self.total_b / self.iteration if self.iteration else 0.0

    @property
    def win_rate_a(self) -> float:
        return self.wins_a / self.iteration if self.iteration else 0.0

    @property
    def win_rate_b(self) -> float:
        return self.wins_b / self.iteration if self.iteration else 0.0


def _default_endpoint_a() -> Endpoint:
    return Endpoint(label="Redis", host="localhost", port=6379)


def _default_endpoint_b() -> Endpoint:
    return Endpoint(label="DragonflyDB", host="localhost", port=6380)


@dataclass
class BenchmarkConfig:
    """Configuration for the benchmark."""
    endpoint_a: Endpoint = field(default_factory=_default_endpoint_a)
    endpoint_b: Endpoint = field(default_factory=_default_endpoint_b)
    socket_connect_timeout: float = 5.0
    socket_timeout: Optional[float] = None
    scenario_timeout: Optional[float] = None

    scan_key_count: int = BenchmarkConstants.SCAN_KEY_COUNT
    scan_clients: int = BenchmarkConstants.SCAN_CLIENTS
    scan_rounds: int = BenchmarkConstants.SCAN_ROUNDS
    scan_value_size: int = BenchmarkConstants.SCAN_VALUE_SIZE
    keys_clients: int = BenchmarkConstants.KEYS_CLIENTS
    keys_iterations: int = BenchmarkConstants.KEYS_ITERATIONS
    info_clients: int = BenchmarkConstants.INFO_CLIENTS
    info_iterations: int = BenchmarkConstants.INFO_ITERATIONS
    bulk_batch_size: int = BenchmarkConstants.BULK_BATCH_SIZE
    bulk_iterations: int = BenchmarkConstants.BULK_ITERATIONS
    bulk_value_size: int = BenchmarkConstants.BULK_VALUE_SIZE
    zset_size: int = BenchmarkConstants.ZSET_SIZE
    zset_clients: int = BenchmarkConstants.ZSET_CLIENTS
    zset_queries_per_client: int = BenchmarkConstants.ZSET_QUERIES_PER_CLIENT
    mixed_clients: int = BenchmarkConstants.MIXED_CLIENTS
    mixed_pipelines_per_client: int = BenchmarkConstants.MIXED_PIPELINES_PER_CLIENT
    mixed_value_size: int = BenchmarkConstants.MIXED_VALUE_SIZE
    live_ops: int = BenchmarkConstants.LIVE_OPS
    live_value_size: int = BenchmarkConstants.LIVE_VALUE_SIZE
    live_interval: float = BenchmarkConstants.LIVE_INTERVAL

    def __post_init__(self):
        # Winners are reported by label, so the two labels must differ
        if self.endpoint_a.label == self.endpoint_b.label:
            raise ValueError(f"Both endpoints are labelled '{self.endpoint_a.label}'; labels must be distinct")

    @property
    def endpoints(self) -> List[Endpoint]:
        return [self.endpoint_a, self.endpoint_b]

    @classmethod
    def from_settings(cls, settings, **overrides) -> "BenchmarkConfig":
        """Build a run configuration from the global settings."""
        values = dict(
            endpoint_a=Endpoint(label=settings.redis_label, host=settings.host, port=settings.redis_port),
            endpoint_b=Endpoint(label=settings.dragonfly_label, host=settings.host, port=settings.dragonfly_port),
            socket_connect_timeout=settings.socket_connect_timeout,
            socket_timeout=settings.socket_timeout,
            scenario_timeout=settings.scenario_timeout,
        )
        values.update(overrides)
        return cls(**values)
