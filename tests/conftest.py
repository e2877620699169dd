"""Shared test configuration and fixtures for all tests."""

import asyncio
import fnmatch
from collections import Counter
from typing import Dict, List, Optional
from unittest.mock import patch

import matplotlib

matplotlib.use("Agg")

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from src.benchmark.models import BenchmarkConfig, Endpoint
from .test_const import TEST_HOST, TEST_PORT_A, TEST_PORT_B, TEST_LABEL_A, TEST_LABEL_B


class FakeStore:
    """In-memory keyspace shared by every connection to one fake server."""

    def __init__(self, unreachable: bool = False, ping_budget: Optional[int] = None,
                 fail_commands=(), delay: float = 0.0, close_error: bool = False,
                 fail_at: Optional[int] = None):
        self.data: Dict[str, object] = {}
        self.unreachable = unreachable
        self.ping_budget = ping_budget
        self.fail_commands = set(fail_commands)
        self.delay = delay
        self.close_error = close_error
        # When set, only the n-th call to a command in fail_commands fails
        self.fail_at = fail_at
        self.calls = Counter()
        self.scan_passes = 0
        self.clients: List["FakeRedis"] = []


class FakePipeline:
    """Buffers commands and replays them in order on execute()."""

    def __init__(self, client: "FakeRedis"):
        self.client = client
        self.commands = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.commands = []

    def __getattr__(self, name):
        def queue(*args, **kwargs):
            self.commands.append((name, args, kwargs))
            return self
        return queue

    async def execute(self):
        self.client.store.calls["pipeline_execute"] += 1
        results = []
        for name, args, kwargs in self.commands:
            results.append(await getattr(self.client, name)(*args, **kwargs))
        self.commands = []
        return results


class FakeRedis:
    """Subset of the redis.asyncio.Redis API used by the benchmark."""

    def __init__(self, store: FakeStore, host: str = TEST_HOST, port: int = TEST_PORT_A,
                 events: Optional[list] = None, **kwargs):
        self.store = store
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self.closed = False
        self.events = events if events is not None else []
        self._scan_snapshot: List[str] = []
        store.clients.append(self)
        self.events.append(("open", port))

    async def _call(self, name: str) -> None:
        self.store.calls[name] += 1
        if name in self.store.fail_commands and self.store.fail_at in (None, self.store.calls[name]):
            raise ResponseError(f"ERR {name} failed")
        if self.store.delay:
            await asyncio.sleep(self.store.delay)

    async def ping(self):
        self.store.calls["ping"] += 1
        if self.store.unreachable:
            raise RedisConnectionError("Connection refused")
        if self.store.ping_budget is not None:
            if self.store.ping_budget <= 0:
                raise RedisConnectionError("Connection refused")
            self.store.ping_budget -= 1
        return True

    async def aclose(self):
        self.closed = True
        self.events.append(("close", self.port))
        if self.store.close_error:
            raise RedisConnectionError("Broken pipe")

    def pipeline(self, transaction: bool = True):
        return FakePipeline(self)

    def _matching(self, pattern: str) -> List[str]:
        return sorted(key for key in self.store.data if fnmatch.fnmatchcase(key, pattern))

    async def scan(self, cursor=0, match=None, count=None):
        await self._call("scan")
        if cursor == 0:
            self._scan_snapshot = self._matching(match or "*")
        page_size = count or 10
        page = [key for key in self._scan_snapshot[cursor:cursor + page_size] if key in self.store.data]
        next_cursor = cursor + page_size
        if next_cursor >= len(self._scan_snapshot):
            next_cursor = 0
            self.store.scan_passes += 1
        return next_cursor, page

    async def keys(self, pattern="*"):
        await self._call("keys")
        return self._matching(pattern)

    async def info(self, section=None):
        await self._call("info")
        return {"used_memory": len(self.store.data)}

    async def dbsize(self):
        await self._call("dbsize")
        return len(self.store.data)

    async def set(self, key, value):
        await self._call("set")
        self.store.data[key] = value
        return True

    async def get(self, key):
        await self._call("get")
        return self.store.data.get(key)

    async def mset(self, mapping):
        await self._call("mset")
        self.store.data.update(mapping)
        return True

    async def mget(self, keys):
        await self._call("mget")
        return [self.store.data.get(key) for key in keys]

    async def incr(self, key):
        await self._call("incr")
        value = int(self.store.data.get(key, 0)) + 1
        self.store.data[key] = value
        return value

    async def lpush(self, key, *values):
        await self._call("lpush")
        items = self.store.data.setdefault(key, [])
        for value in values:
            items.insert(0, value)
        return len(items)

    async def hset(self, key, field, value):
        await self._call("hset")
        fields = self.store.data.setdefault(key, {})
        added = 0 if field in fields else 1
        fields[field] = value
        return added

    async def zadd(self, key, mapping):
        await self._call("zadd")
        members = self.store.data.setdefault(key, {})
        added = sum(1 for member in mapping if member not in members)
        members.update(mapping)
        return added

    async def zcard(self, key):
        return len(self.store.data.get(key, {}))

    async def zrevrange(self, key, start, end, withscores=False):
        await self._call("zrevrange")
        ranked = sorted(self.store.data.get(key, {}).items(), key=lambda item: item[1], reverse=True)
        ranked = ranked[start:end + 1]
        return ranked if withscores else [member for member, _ in ranked]

    async def zrangebyscore(self, key, min, max, start=None, num=None, withscores=False):
        await self._call("zrangebyscore")
        ranked = sorted(
            (item for item in self.store.data.get(key, {}).items() if min <= item[1] <= max),
            key=lambda item: item[1],
        )
        if start is not None and num is not None:
            ranked = ranked[start:start + num]
        return ranked if withscores else [member for member, _ in ranked]

    async def zcount(self, key, min, max):
        await self._call("zcount")
        return sum(1 for score in self.store.data.get(key, {}).values() if min <= score <= max)

    async def delete(self, *keys):
        await self._call("delete")
        removed = 0
        for key in keys:
            if self.store.data.pop(key, None) is not None:
                removed += 1
        return removed


class FakeServers(dict):
    """Fake servers keyed by port, created on first connection."""

    def __init__(self):
        super().__init__()
        self.events = []

    def connect(self, host=TEST_HOST, port=TEST_PORT_A, **kwargs) -> FakeRedis:
        store = self.setdefault(port, FakeStore())
        return FakeRedis(store, host=host, port=port, events=self.events, **kwargs)


@pytest.fixture
def fake_servers():
    """Patch the Redis client class used by the pool manager with in-memory fakes."""
    servers = FakeServers()
    with patch('src.benchmark.client_pool_manager.Redis', side_effect=servers.connect):
        yield servers


@pytest.fixture
def endpoint_a():
    return Endpoint(label=TEST_LABEL_A, host=TEST_HOST, port=TEST_PORT_A)


@pytest.fixture
def endpoint_b():
    return Endpoint(label=TEST_LABEL_B, host=TEST_HOST, port=TEST_PORT_B)


@pytest.fixture
def small_config(endpoint_a, endpoint_b):
    """Benchmark configuration small enough for the in-memory fakes."""
    return BenchmarkConfig(
        endpoint_a=endpoint_a,
        endpoint_b=endpoint_b,
        scan_key_count=1200,
        scan_clients=3,
        scan_rounds=2,
        scan_value_size=16,
        keys_clients=2,
        keys_iterations=3,
        info_clients=2,
        info_iterations=4,
        bulk_batch_size=20,
        bulk_iterations=3,
        bulk_value_size=32,
        zset_size=300,
        zset_clients=2,
        zset_queries_per_client=4,
        mixed_clients=2,
        mixed_pipelines_per_client=3,
        mixed_value_size=16,
        live_ops=50,
        live_value_size=16,
    )
