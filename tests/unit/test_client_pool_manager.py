"""Unit tests for per-scenario connection pools."""

import pytest

from src.benchmark.client_pool_manager import ClientPoolManager
from src.benchmark.exceptions import EndpointConnectionError
from ..conftest import FakeStore
from ..test_const import TEST_PORT_A, TEST_LABEL_A


class TestClientPoolManager:

    @pytest.mark.asyncio
    async def test_create_pool_opens_ready_connections(self, fake_servers, small_config, endpoint_a):
        manager = ClientPoolManager(small_config)
        pool = await manager.create_pool(endpoint_a, 4)

        assert len(pool) == 4
        assert pool.endpoint == endpoint_a
        assert len({id(client) for client in pool}) == 4
        assert fake_servers[TEST_PORT_A].calls["ping"] == 4

        await manager.close_pool(pool)
        assert all(client.closed for client in pool)

    @pytest.mark.asyncio
    async def test_connection_options(self, fake_servers, small_config, endpoint_a):
        manager = ClientPoolManager(small_config)
        client = await manager.open_client(endpoint_a)
        assert client.kwargs["decode_responses"] is True
        assert client.kwargs["socket_connect_timeout"] == small_config.socket_connect_timeout

    @pytest.mark.asyncio
    async def test_no_partial_pool(self, fake_servers, small_config, endpoint_a):
        fake_servers[TEST_PORT_A] = FakeStore(ping_budget=2)
        manager = ClientPoolManager(small_config)

        with pytest.raises(EndpointConnectionError) as exc_info:
            await manager.create_pool(endpoint_a, 5, scenario="Concurrent SCAN")

        clients = fake_servers[TEST_PORT_A].clients
        assert len(clients) == 3
        assert all(client.closed for client in clients)
        assert exc_info.value.endpoint == endpoint_a
        assert exc_info.value.scenario == "Concurrent SCAN"
        assert TEST_LABEL_A in str(exc_info.value)
        assert "verify it is running" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_close_tolerates_broken_connections(self, fake_servers, small_config, endpoint_a):
        fake_servers[TEST_PORT_A] = FakeStore(close_error=True)
        manager = ClientPoolManager(small_config)
        pool = await manager.create_pool(endpoint_a, 3)

        await manager.close_pool(pool)

        assert all(client.closed for client in pool)

    @pytest.mark.asyncio
    async def test_open_pool_closes_on_error(self, fake_servers, small_config, endpoint_a):
        manager = ClientPoolManager(small_config)

        with pytest.raises(RuntimeError):
            async with manager.open_pool(endpoint_a, 2) as pool:
                raise RuntimeError("boom")

        assert all(client.closed for client in pool)

    @pytest.mark.asyncio
    async def test_invalid_pool_size(self, fake_servers, small_config, endpoint_a):
        manager = ClientPoolManager(small_config)
        with pytest.raises(ValueError):
            await manager.create_pool(endpoint_a, 0)
