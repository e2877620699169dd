"""Manages per-scenario pools of Redis protocol connections."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from .models import BenchmarkConfig, ClientPool, Endpoint
from .exceptions import EndpointConnectionError


# Configure logging
logger = logging.getLogger(__name__)


class ClientPoolManager:
    """Opens and closes independent connections to one endpoint."""

    def __init__(self, config: BenchmarkConfig):
        self.config = config

    def _new_client(self, endpoint: Endpoint) -> Redis:
        return Redis(
            host=endpoint.host,
            port=endpoint.port,
            decode_responses=True,
            socket_connect_timeout=self.config.socket_connect_timeout,
            socket_timeout=self.config.socket_timeout,
        )

    async def open_client(self, endpoint: Endpoint, scenario: Optional[str] = None) -> Redis:
        """
        Open a single ready connection.

        Raises:
            EndpointConnectionError: If the endpoint does not answer PING.
        """
        client = self._new_client(endpoint)
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.error(f"Connection to {endpoint.label} ({endpoint.address}) failed: {e}")
            await self.close_client(client, endpoint)
            raise EndpointConnectionError(endpoint, scenario) from e
        return client

    async def create_pool(self, endpoint: Endpoint, count: int, scenario: Optional[str] = None) -> ClientPool:
        """
        Open ``count`` independent connections, each ready before returning.

        Args:
            endpoint: Target server.
            count: Number of connections.
            scenario: Scenario name, used in error reports.

        Returns:
            ClientPool holding every connection.

        Raises:
            EndpointConnectionError: If any connection fails; connections opened
                so far are closed first.
        """
        if count < 1:
            raise ValueError(f"Pool size must be at least 1, got {count}")

        clients: List[Redis] = []
        try:
            for _ in range(count):
                clients.append(await self.open_client(endpoint, scenario))
        except EndpointConnectionError:
            await self.close_pool(ClientPool(endpoint=endpoint, clients=tuple(clients)))
            raise

        logger.debug(f"Opened {count} connections to {endpoint.label} ({endpoint.address})")
        return ClientPool(endpoint=endpoint, clients=tuple(clients))

    async def close_pool(self, pool: ClientPool) -> None:
        """Close every connection in the pool, tolerating broken ones."""
        for client in pool.clients:
            await self.close_client(client, pool.endpoint)

    @asynccontextmanager
    async def open_pool(self, endpoint: Endpoint, count: int, scenario: Optional[str] = None) -> AsyncIterator[ClientPool]:
        """Pool scoped to a ``async with`` block."""
        pool = await self.create_pool(endpoint, count, scenario)
        try:
            yield pool
        finally:
            await self.close_pool(pool)

    @staticmethod
    async def close_client(client: Redis, endpoint: Endpoint) -> None:
        """Best-effort close; errors from broken connections are logged, not raised."""
        try:
            await client.aclose()
        except (RedisError, OSError) as e:
            logger.warning(f"Ignoring error while closing connection to {endpoint.label}: {e}")
