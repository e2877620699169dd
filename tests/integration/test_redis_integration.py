"""Integration tests against a real Redis-protocol server.

These tests connect to the server configured through KV_BENCH_HOST and
KV_BENCH_REDIS_PORT (localhost:6379 by default) and skip gracefully when
nothing is listening there.
"""

import random

import pytest
import pytest_asyncio
from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.benchmark.client_pool_manager import ClientPoolManager
from src.benchmark.constants import BenchmarkConstants
from src.benchmark.keyspace_cleaner import KeyspaceCleaner
from src.benchmark.models import BenchmarkConfig, Endpoint
from src.benchmark.scenario_runner import ScenarioRunner
from src.shared.config import Config


@pytest.fixture
def live_endpoint():
    settings = Config()
    return Endpoint(label=settings.redis_label, host=settings.host, port=settings.redis_port)


@pytest_asyncio.fixture
async def live_client(live_endpoint):
    client = Redis(host=live_endpoint.host, port=live_endpoint.port, decode_responses=True,
                   socket_connect_timeout=1.0)
    try:
        await client.ping()
    except (RedisError, OSError):
        await client.aclose()
        pytest.skip(f"No server reachable at {live_endpoint.address}")
    await KeyspaceCleaner.cleanup(client)
    yield client
    await KeyspaceCleaner.cleanup(client)
    await client.aclose()


@pytest.fixture
def live_runner(live_endpoint):
    config = BenchmarkConfig(endpoint_a=live_endpoint)
    return ScenarioRunner(config, ClientPoolManager(config), rng=random.Random(7))


class TestRedisIntegration:
    """Scenario runs against a real server."""

    @pytest.mark.asyncio
    async def test_concurrent_scan_reference_size(self, live_client, live_runner, live_endpoint):
        result = await live_runner.concurrent_scan(live_endpoint, num_clients=8, keys_to_create=100000,
                                                   rounds=10, value_size=256)
        assert result.total_operations == 80
        assert result.throughput > 0
        assert await KeyspaceCleaner.count_keys(live_client, (BenchmarkConstants.SCAN_PREFIX,)) == 100000

    @pytest.mark.asyncio
    async def test_bulk_round_trip(self, live_client, live_runner, live_endpoint):
        result = await live_runner.bulk_operations(live_endpoint, batch_size=500, iterations=50, value_size=1024)
        assert result.total_operations == 50000

        values = await live_client.mget([f"bulk:49:{i}" for i in range(500)])
        assert all(value is not None and len(value) == 1024 for value in values)

    @pytest.mark.asyncio
    async def test_sorted_set_and_mixed(self, live_client, live_runner, live_endpoint):
        zset = await live_runner.sorted_set_queries(live_endpoint, set_size=1000, num_clients=2,
                                                    queries_per_client=5)
        mixed = await live_runner.pipelined_mixed(live_endpoint, num_clients=2, pipelines_per_client=2,
                                                  value_size=32)
        assert zset.total_operations == 30
        assert mixed.total_operations == 1000
        assert int(await live_client.get("mixed:counter:0")) == 100

    @pytest.mark.asyncio
    async def test_cleanup_leaves_no_benchmark_keys(self, live_client, live_runner, live_endpoint):
        await live_runner.concurrent_scan(live_endpoint, num_clients=1, keys_to_create=2000, rounds=1)
        await live_runner.bulk_operations(live_endpoint, batch_size=10, iterations=2)
        await live_client.set("unrelated:key", "keep")

        await KeyspaceCleaner.cleanup(live_client)

        assert await KeyspaceCleaner.count_keys(live_client) == 0
        assert await live_client.get("unrelated:key") == "keep"
        await live_client.delete("unrelated:key")
