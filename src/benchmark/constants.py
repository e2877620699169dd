"""Constants for the benchmarking system."""
from typing import Tuple


class BenchmarkConstants:
    """Centralized constants for benchmark configuration."""
    VALUE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

    # Key namespaces, one per scenario
    SCAN_PREFIX = "scan"
    BULK_PREFIX = "bulk"
    LEADERBOARD_PREFIX = "leaderboard"
    MIXED_PREFIX = "mixed"
    LIVE_PREFIX = "bench"
    CLEANUP_PREFIXES: Tuple[str, ...] = (SCAN_PREFIX, BULK_PREFIX, LEADERBOARD_PREFIX, MIXED_PREFIX, LIVE_PREFIX)

    LEADERBOARD_KEY = "leaderboard:main"

    # Page and batch sizes
    POPULATE_BATCH_SIZE = 5000
    SCAN_PAGE_SIZE = 500
    CLEANUP_PAGE_SIZE = 1000

    # Concurrent SCAN
    SCAN_KEY_COUNT = 100000
    SCAN_CLIENTS = 8
    SCAN_ROUNDS = 10
    SCAN_VALUE_SIZE = 256

    # KEYS pattern matching
    KEYS_CLIENTS = 8
    KEYS_ITERATIONS = 20

    # INFO / DBSIZE
    INFO_CLIENTS = 10
    INFO_ITERATIONS = 100
    INFO_SECTION = "memory"

    # MSET / MGET
    BULK_BATCH_SIZE = 500
    BULK_ITERATIONS = 50
    BULK_VALUE_SIZE = 1024

    # Sorted set range queries
    ZSET_SIZE = 100000
    ZSET_CLIENTS = 6
    ZSET_QUERIES_PER_CLIENT = 100
    ZSET_MAX_SCORE = 1000000
    ZSET_RANGE_MAX_SCORE = 500000
    ZSET_TOP_K = 100
    ZSET_QUERY_SHAPES = 3

    # Pipelined mixed workload
    MIXED_CLIENTS = 10
    MIXED_PIPELINES_PER_CLIENT = 100
    MIXED_VALUE_SIZE = 512
    MIXED_REPETITIONS = 50
    MIXED_COMMAND_KINDS = 5

    # Live dashboard
    LIVE_OPS = 10000
    LIVE_VALUE_SIZE = 1024
    LIVE_INTERVAL = 2.0  # seconds
    LIVE_WINDOW = 20

    # Terminal bar chart width
    BAR_SCALE = 60

    # Export file names
    COMPARISON_CSV = "kv_comparison.csv"
    THROUGHPUT_GRAPH = "kv_throughput_graph.png"
    SPEEDUP_GRAPH = "kv_speedup_graph.png"
