"""Generates synthetic payloads and scenario key names."""
import random
from typing import Optional

from .constants import BenchmarkConstants


class WorkloadGenerator:
    """Generates synthetic payloads and scenario key names."""

    @staticmethod
    def generate_value(size: int, rng: Optional[random.Random] = None) -> str:
        """
        Generate a random alphanumeric string.

        Args:
            size: Exact length of the returned string.
            rng: Optional random source, for reproducible payloads.

        Returns:
            String of ``size`` characters drawn uniformly from the value alphabet.
        """
        if size < 0:
            raise ValueError(f"Value size must be non-negative, got {size}")
        source = rng if rng is not None else random
        return "".join(source.choices(BenchmarkConstants.VALUE_ALPHABET, k=size))

    @staticmethod
    def make_key(prefix: str, *parts) -> str:
        """Build a namespaced key such as ``scan:key:42`` from loop indices."""
        return ":".join([prefix, *(str(part) for part in parts)])

    @staticmethod
    def pattern(prefix: str) -> str:
        """Glob pattern matching every key of a namespace."""
        return f"{prefix}:*"
