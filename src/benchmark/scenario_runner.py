"""Executes the benchmark scenarios against one endpoint and times them."""
import asyncio
import logging
import random
import time
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError, RedisError

from .constants import BenchmarkConstants
from .client_pool_manager import ClientPoolManager
from .exceptions import EndpointConnectionError, ScenarioExecutionError, ScenarioTimeoutError
from .models import BenchmarkConfig, Endpoint, ScenarioResult
from .workload_generator import WorkloadGenerator


# Configure logging
logger = logging.getLogger(__name__)


class ScenarioRunner:
    """Runs one scenario at a time against one endpoint.

    Every scenario opens its own client pool, performs any population
    outside the timed window, fans the measured work out across the pool
    and returns a ScenarioResult. Any command error aborts the scenario.
    """

    CONCURRENT_SCAN = "Concurrent SCAN"
    KEYS_PATTERN = "KEYS Pattern"
    MEMORY_INFO = "Memory Info"
    BULK_MSET_MGET = "Bulk MSET/MGET"
    SORTED_SET_QUERIES = "Sorted Set Queries"
    MIXED_WORKLOAD = "Mixed Workload"
    QUICK_SET = "Quick SET"

    def __init__(self, config: BenchmarkConfig, pool_manager: ClientPoolManager,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.pool_manager = pool_manager
        self.rng = rng if rng is not None else random.Random()

    @contextmanager
    def _translate_errors(self, endpoint: Endpoint, scenario: str):
        try:
            yield
        except RedisConnectionError as e:
            logger.error(f"{endpoint.label}: lost connection during '{scenario}': {e}")
            raise EndpointConnectionError(endpoint, scenario) from e
        except RedisError as e:
            logger.error(f"{endpoint.label}: command failed during '{scenario}': {e}")
            raise ScenarioExecutionError(endpoint, scenario) from e

    async def _measure(self, endpoint: Endpoint, scenario: str, total_operations: int,
                       work: Callable[[], Awaitable]) -> ScenarioResult:
        """Time ``work`` and turn the elapsed time into a ScenarioResult."""
        timeout = self.config.scenario_timeout
        start = time.perf_counter()
        try:
            if timeout is None:
                await work()
            else:
                await asyncio.wait_for(work(), timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{endpoint.label}: '{scenario}' timed out after {timeout}s")
            raise ScenarioTimeoutError(endpoint, scenario, timeout) from e
        duration = time.perf_counter() - start

        result = ScenarioResult.from_measurement(duration, total_operations)
        logger.info(
            f"{endpoint.label}: {result.total_operations:,} {scenario} ops in {result.duration:.2f}s "
            f"({result.throughput:,.0f} ops/sec)"
        )
        return result

    @staticmethod
    async def _fan_out(coros: Iterable[Awaitable]) -> List[Any]:
        """
        Run one coroutine per client concurrently and fail fast.

        The first client error cancels every sibling and waits for them to
        finish, so no command is issued after the pool is closed. The same
        happens when the whole fan-out is cancelled by the timeout hook.
        """
        tasks = [asyncio.ensure_future(coro) for coro in coros]
        if not tasks:
            return []
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            for task in tasks:
                if task.done() and not task.cancelled() and task.exception() is not None:
                    raise task.exception()
            return [task.result() for task in tasks]
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    @staticmethod
    async def _populate(client: Redis, count: int, add: Callable[[object, int], None]) -> None:
        """Insert ``count`` items in pipelined batches; ``add`` queues item ``i``."""
        batch_size = BenchmarkConstants.POPULATE_BATCH_SIZE
        for batch in range(0, count, batch_size):
            async with client.pipeline(transaction=False) as pipe:
                for i in range(batch, min(batch + batch_size, count)):
                    add(pipe, i)
                await pipe.execute()

    async def concurrent_scan(self, endpoint: Endpoint, num_clients: int, keys_to_create: int,
                              rounds: int = BenchmarkConstants.SCAN_ROUNDS,
                              value_size: int = BenchmarkConstants.SCAN_VALUE_SIZE) -> ScenarioResult:
        """
        Populate the scan namespace, then have every client walk it to completion.

        Args:
            endpoint: Target server.
            num_clients: Concurrent clients.
            keys_to_create: Keys inserted before timing starts.
            rounds: Full SCAN passes per client.
            value_size: Length of the stored value.

        Returns:
            ScenarioResult with ``num_clients * rounds`` operations.
        """
        scenario = self.CONCURRENT_SCAN
        prefix = BenchmarkConstants.SCAN_PREFIX
        match = WorkloadGenerator.pattern(prefix)
        page_size = BenchmarkConstants.SCAN_PAGE_SIZE

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, num_clients, scenario) as pool:
                logger.info(f"{endpoint.label}: creating {keys_to_create:,} keys...")
                value = WorkloadGenerator.generate_value(value_size, self.rng)
                await self._populate(
                    pool.clients[0], keys_to_create,
                    lambda pipe, i: pipe.set(WorkloadGenerator.make_key(prefix, "key", i), value),
                )

                async def scan_passes(client: Redis) -> int:
                    seen = 0
                    for _ in range(rounds):
                        cursor = 0
                        while True:
                            cursor, keys = await client.scan(cursor=cursor, match=match, count=page_size)
                            seen += len(keys)
                            if cursor == 0:
                                break
                    return seen

                return await self._measure(
                    endpoint, scenario, num_clients * rounds,
                    lambda: self._fan_out(scan_passes(client) for client in pool),
                )

    async def keys_pattern(self, endpoint: Endpoint, num_clients: int, iterations: int) -> ScenarioResult:
        """Every client lists the scan namespace with KEYS ``iterations`` times."""
        scenario = self.KEYS_PATTERN
        pattern = WorkloadGenerator.pattern(WorkloadGenerator.make_key(BenchmarkConstants.SCAN_PREFIX, "key"))

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, num_clients, scenario) as pool:
                async def list_keys(client: Redis) -> None:
                    for _ in range(iterations):
                        await client.keys(pattern)

                return await self._measure(
                    endpoint, scenario, num_clients * iterations,
                    lambda: self._fan_out(list_keys(client) for client in pool),
                )

    async def memory_info(self, endpoint: Endpoint, num_clients: int, iterations: int) -> ScenarioResult:
        """Every client alternates INFO memory and DBSIZE ``iterations`` times."""
        scenario = self.MEMORY_INFO

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, num_clients, scenario) as pool:
                async def admin_queries(client: Redis) -> None:
                    for _ in range(iterations):
                        await client.info(BenchmarkConstants.INFO_SECTION)
                        await client.dbsize()

                return await self._measure(
                    endpoint, scenario, num_clients * iterations * 2,
                    lambda: self._fan_out(admin_queries(client) for client in pool),
                )

    async def bulk_operations(self, endpoint: Endpoint, batch_size: int, iterations: int,
                              value_size: int = BenchmarkConstants.BULK_VALUE_SIZE) -> ScenarioResult:
        """One connection issues an MSET then an MGET of ``batch_size`` keys per iteration."""
        scenario = self.BULK_MSET_MGET
        prefix = BenchmarkConstants.BULK_PREFIX

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, 1, scenario) as pool:
                client = pool.clients[0]
                value = WorkloadGenerator.generate_value(value_size, self.rng)

                async def batches() -> None:
                    for iteration in range(iterations):
                        keys = [WorkloadGenerator.make_key(prefix, iteration, i) for i in range(batch_size)]
                        await client.mset({key: value for key in keys})
                        await client.mget(keys)

                return await self._measure(endpoint, scenario, iterations * batch_size * 2, batches)

    async def sorted_set_queries(self, endpoint: Endpoint, set_size: int, num_clients: int,
                                 queries_per_client: int) -> ScenarioResult:
        """
        Fill the leaderboard sorted set, then run three range-query shapes per iteration.

        The shapes are a reverse top-K with scores, a bounded score range with a
        limit, and a range count.
        """
        scenario = self.SORTED_SET_QUERIES
        key = BenchmarkConstants.LEADERBOARD_KEY
        max_score = BenchmarkConstants.ZSET_MAX_SCORE
        range_max = BenchmarkConstants.ZSET_RANGE_MAX_SCORE
        top_k = BenchmarkConstants.ZSET_TOP_K

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, num_clients, scenario) as pool:
                logger.info(f"{endpoint.label}: creating sorted set with {set_size:,} members...")
                await self._populate(
                    pool.clients[0], set_size,
                    lambda pipe, i: pipe.zadd(key, {f"player:{i}": self.rng.random() * max_score}),
                )

                async def range_queries(client: Redis) -> None:
                    for _ in range(queries_per_client):
                        await client.zrevrange(key, 0, top_k - 1, withscores=True)
                        await client.zrangebyscore(key, 0, range_max, start=0, num=top_k, withscores=True)
                        await client.zcount(key, 0, range_max)

                return await self._measure(
                    endpoint, scenario, num_clients * queries_per_client * BenchmarkConstants.ZSET_QUERY_SHAPES,
                    lambda: self._fan_out(range_queries(client) for client in pool),
                )

    async def pipelined_mixed(self, endpoint: Endpoint, num_clients: int, pipelines_per_client: int,
                              value_size: int = BenchmarkConstants.MIXED_VALUE_SIZE) -> ScenarioResult:
        """Every client sends pipelines of SET, GET, INCR, LPUSH and HSET."""
        scenario = self.MIXED_WORKLOAD
        prefix = BenchmarkConstants.MIXED_PREFIX
        repetitions = BenchmarkConstants.MIXED_REPETITIONS

        with self._translate_errors(endpoint, scenario):
            async with self.pool_manager.open_pool(endpoint, num_clients, scenario) as pool:
                value = WorkloadGenerator.generate_value(value_size, self.rng)

                async def mixed(client_idx: int, client: Redis) -> None:
                    # Counters, lists and hashes are keyed per client to avoid cross-client interference
                    counter = WorkloadGenerator.make_key(prefix, "counter", client_idx)
                    items = WorkloadGenerator.make_key(prefix, "list", client_idx)
                    fields = WorkloadGenerator.make_key(prefix, "hash", client_idx)
                    for p in range(pipelines_per_client):
                        async with client.pipeline(transaction=False) as pipe:
                            for i in range(repetitions):
                                key = WorkloadGenerator.make_key(prefix, "kv", client_idx, p, i)
                                pipe.set(key, value)
                                pipe.get(key)
                                pipe.incr(counter)
                                pipe.lpush(items, f"item-{i}")
                                pipe.hset(fields, f"field-{i}", value)
                            await pipe.execute()

                total_ops = num_clients * pipelines_per_client * repetitions * BenchmarkConstants.MIXED_COMMAND_KINDS
                return await self._measure(
                    endpoint, scenario, total_ops,
                    lambda: self._fan_out(mixed(idx, client) for idx, client in enumerate(pool)),
                )

    async def quick_set(self, client: Redis, endpoint: Endpoint, num_ops: int,
                        value_size: int = BenchmarkConstants.LIVE_VALUE_SIZE) -> ScenarioResult:
        """
        Single pipeline of SETs on an already-open connection.

        Used by the live dashboard, which keeps its connections across iterations.
        """
        scenario = self.QUICK_SET
        prefix = BenchmarkConstants.LIVE_PREFIX
        value = WorkloadGenerator.generate_value(value_size, self.rng)

        async def pipeline() -> None:
            async with client.pipeline(transaction=False) as pipe:
                for i in range(num_ops):
                    pipe.set(WorkloadGenerator.make_key(prefix, i), value)
                await pipe.execute()

        with self._translate_errors(endpoint, scenario):
            return await self._measure(endpoint, scenario, num_ops, pipeline)
