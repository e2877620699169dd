"""Compares scenario results between two endpoints."""
import logging
import math
from typing import Iterable, List

from .models import ComparisonEntry, Endpoint, RunSummary, ScenarioResult


# Configure logging
logger = logging.getLogger(__name__)


class Comparator:
    """Picks a winner per scenario and rolls the run up into a summary.

    Strictly greater throughput wins. On an exact tie the first endpoint
    (endpoint A) is reported as the winner with a speedup ratio of 1.0.
    """

    @staticmethod
    def speedup_ratio(faster: float, slower: float) -> float:
        """Throughput of the faster endpoint over the slower one, never below 1.0."""
        if faster == slower:
            return 1.0
        if slower <= 0:
            return math.inf
        return faster / slower

    @classmethod
    def compare(cls, scenario_name: str, endpoint_a: Endpoint, result_a: ScenarioResult,
                endpoint_b: Endpoint, result_b: ScenarioResult) -> ComparisonEntry:
        """
        Compare one scenario's results.

        Args:
            scenario_name: Scenario the results belong to.
            endpoint_a: First endpoint; wins exact ties.
            result_a: Result measured on endpoint A.
            endpoint_b: Second endpoint.
            result_b: Result measured on endpoint B.

        Returns:
            ComparisonEntry with winner label and speedup ratio.
        """
        if result_b.throughput > result_a.throughput:
            winner = endpoint_b.label
            ratio = cls.speedup_ratio(result_b.throughput, result_a.throughput)
        else:
            winner = endpoint_a.label
            ratio = cls.speedup_ratio(result_a.throughput, result_b.throughput)

        entry = ComparisonEntry(
            scenario_name=scenario_name,
            endpoint_a=endpoint_a,
            endpoint_b=endpoint_b,
            result_a=result_a,
            result_b=result_b,
            winner=winner,
            speedup_ratio=ratio,
        )
        logger.debug(f"{scenario_name}: {winner} wins ({ratio:.2f}x)")
        return entry

    @staticmethod
    def summarize(endpoint_a: Endpoint, endpoint_b: Endpoint, entries: Iterable[ComparisonEntry]) -> RunSummary:
        """Fold every comparison into win counts and winning-side speedups."""
        speedups_a: List[float] = []
        speedups_b: List[float] = []
        total = 0
        for entry in entries:
            total += 1
            if entry.winner == endpoint_a.label:
                speedups_a.append(entry.speedup_ratio)
            else:
                speedups_b.append(entry.speedup_ratio)

        return RunSummary(
            endpoint_a=endpoint_a,
            endpoint_b=endpoint_b,
            wins_a=len(speedups_a),
            wins_b=len(speedups_b),
            speedups_a=tuple(speedups_a),
            speedups_b=tuple(speedups_b),
            total_scenarios=total,
        )
