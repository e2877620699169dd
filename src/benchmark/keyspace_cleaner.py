"""Removes benchmark keys from an endpoint."""
import logging
from typing import AsyncIterator, Iterable, List

from redis.asyncio import Redis

from .constants import BenchmarkConstants
from .workload_generator import WorkloadGenerator


# Configure logging
logger = logging.getLogger(__name__)


class KeyspaceCleaner:
    """Scans and deletes keys under the benchmark namespaces."""

    @staticmethod
    async def _scan_pages(client: Redis, prefix: str) -> AsyncIterator[List[str]]:
        cursor = 0
        while True:
            cursor, keys = await client.scan(
                cursor=cursor,
                match=WorkloadGenerator.pattern(prefix),
                count=BenchmarkConstants.CLEANUP_PAGE_SIZE,
            )
            if keys:
                yield keys
            if cursor == 0:
                break

    @classmethod
    async def cleanup(cls, client: Redis, prefixes: Iterable[str] = BenchmarkConstants.CLEANUP_PREFIXES) -> int:
        """
        Delete every key under the given namespaces.

        Args:
            client: Open connection to the endpoint.
            prefixes: Namespaces to clear.

        Returns:
            Number of keys deleted.
        """
        deleted = 0
        for prefix in prefixes:
            async for keys in cls._scan_pages(client, prefix):
                deleted += await client.delete(*keys)
        logger.debug(f"Deleted {deleted} benchmark keys")
        return deleted

    @classmethod
    async def count_keys(cls, client: Redis, prefixes: Iterable[str] = BenchmarkConstants.CLEANUP_PREFIXES) -> int:
        """Count the distinct keys currently stored under the given namespaces."""
        seen = set()
        for prefix in prefixes:
            async for keys in cls._scan_pages(client, prefix):
                seen.update(keys)
        return len(seen)
