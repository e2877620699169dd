"""Formats comparison results for the terminal."""
import logging
import math
from typing import List

from tabulate import tabulate
from termcolor import colored

from .constants import BenchmarkConstants
from .models import ComparisonEntry, Endpoint, RunSummary


# Configure logging
logger = logging.getLogger(__name__)

RULE_WIDTH = 100


def format_ops(value: float) -> str:
    """Throughput with thousands separators, e.g. ``1,234,567``."""
    if math.isinf(value):
        return "inf"
    return f"{value:,.0f}"


def format_ratio(value: float) -> str:
    if math.isinf(value):
        return "inf"
    return f"{value:.1f}x"


class ReportRenderer:
    """Turns comparison entries and the run summary into terminal text.

    The ``format_*`` methods are pure and return strings; ``render`` prints
    them. Numbers are only formatted, never recomputed.
    """

    def __init__(self, endpoint_a: Endpoint, endpoint_b: Endpoint):
        self.endpoint_a = endpoint_a
        self.endpoint_b = endpoint_b

    def _color_for(self, label: str) -> str:
        return "blue" if label == self.endpoint_a.label else "magenta"

    def _rule(self) -> str:
        return colored("━" * RULE_WIDTH, "dark_grey")

    def format_header(self) -> str:
        title = f"   When Speed Takes Flight: {self.endpoint_b.label} vs {self.endpoint_a.label}"
        lines = [" " * 78, title.ljust(78), "   Performance Benchmark Suite".ljust(78), " " * 78]
        return "\n".join(colored(line, "white", "on_magenta", attrs=["bold"]) for line in lines)

    def format_architecture(self) -> str:
        lines = [
            colored("   Architecture Comparison", "cyan", attrs=["bold"]),
            "",
            colored(f"   {self.endpoint_a.label} ({self.endpoint_a.address})", "blue"),
            colored("   • Single-threaded event loop", "dark_grey"),
            colored("   • All operations serialized on one CPU core", "dark_grey"),
            colored("   • Scales via clustering (multiple instances)", "dark_grey"),
            "",
            colored(f"   {self.endpoint_b.label} ({self.endpoint_b.address})", "magenta"),
            colored("   • Multi-threaded shared-nothing architecture", "dark_grey"),
            colored("   • Operations parallelized across CPU cores", "dark_grey"),
            colored("   • Scales vertically on single instance", "dark_grey"),
        ]
        return "\n".join(lines)

    def format_comparison_table(self, entries: List[ComparisonEntry]) -> str:
        """Scenario table with both throughputs, the winner and the speedup."""
        headers = [
            colored("Benchmark", "cyan", attrs=["bold"]),
            colored(self.endpoint_a.label, "blue", attrs=["bold"]),
            colored(self.endpoint_b.label, "magenta", attrs=["bold"]),
            colored("Winner", "green", attrs=["bold"]),
            colored("Difference", "yellow", attrs=["bold"]),
        ]
        rows = []
        for entry in entries:
            winner_color = self._color_for(entry.winner)
            difference = "tie" if entry.is_tie else f"{format_ratio(entry.speedup_ratio)} faster"
            rows.append([
                entry.scenario_name,
                colored(format_ops(entry.result_a.throughput), "blue"),
                colored(format_ops(entry.result_b.throughput), "magenta"),
                colored(entry.winner, winner_color, attrs=["bold"]),
                colored(difference, "green" if entry.winner == self.endpoint_b.label else "blue"),
            ])

        title = colored("BENCHMARK RESULTS (ops/sec)", "yellow", attrs=["bold"])
        table = tabulate(rows, headers=headers, tablefmt="grid", disable_numparse=True)
        return "\n".join([title, self._rule(), table])

    def format_bar_chart(self, entries: List[ComparisonEntry]) -> str:
        """Horizontal bars scaled against the fastest throughput of the run."""
        lines = [colored("VISUAL COMPARISON", "yellow", attrs=["bold"]), self._rule()]
        if not entries:
            return "\n".join(lines)

        finite = [ops for entry in entries
                  for ops in (entry.result_a.throughput, entry.result_b.throughput)
                  if not math.isinf(ops)]
        max_ops = max(finite) if finite else 0.0
        name_width = max(len(self.endpoint_a.label), len(self.endpoint_b.label)) + 2

        def bar(ops: float) -> int:
            if max_ops <= 0 or math.isinf(ops):
                return BenchmarkConstants.BAR_SCALE
            return max(1, round(ops / max_ops * BenchmarkConstants.BAR_SCALE))

        for entry in entries:
            lines.append("")
            lines.append(colored(f"  {entry.scenario_name}", "white", attrs=["bold"]))
            for endpoint, result, color in ((entry.endpoint_a, entry.result_a, "blue"),
                                            (entry.endpoint_b, entry.result_b, "magenta")):
                lines.append(
                    colored(f"  {endpoint.label:<{name_width}}", color)
                    + colored("█" * bar(result.throughput), color)
                    + " " + colored(format_ops(result.throughput), "dark_grey")
                )
            if not entry.is_tie:
                lines.append(colored(
                    f"  {'':<{name_width}}{entry.winner} {format_ratio(entry.speedup_ratio)} faster",
                    "green", attrs=["bold"],
                ))
        return "\n".join(lines)

    def format_summary(self, summary: RunSummary) -> str:
        """Win counts and average/max speedups per endpoint."""
        lines = [
            colored("SUMMARY", "yellow", attrs=["bold"]),
            self._rule(),
            "",
            colored("  Results Overview:", "cyan"),
        ]
        for endpoint in (summary.endpoint_a, summary.endpoint_b):
            lines.append(colored(
                f"  • {endpoint.label} won: {summary.wins(endpoint.label)}/{summary.total_scenarios} benchmarks",
                self._color_for(endpoint.label),
            ))
        for endpoint in (summary.endpoint_a, summary.endpoint_b):
            mean = summary.mean_speedup(endpoint.label)
            if mean is None:
                continue
            peak = summary.max_speedup(endpoint.label)
            lines.append(colored(
                f"  • {endpoint.label} avg speedup: {format_ratio(mean)} (max: {format_ratio(peak)})",
                "green",
            ))
        lines.extend(["", colored("  Key Points:", "cyan"), ""])
        lines.extend(self._key_points())
        return "\n".join(lines)

    def _key_points(self) -> List[str]:
        label_a, label_b = self.endpoint_a.label, self.endpoint_b.label
        points = [
            ("SCAN Operations", f"{label_b} excels at parallel scanning",
             "Multiple clients can scan data simultaneously without blocking."),
            ("Memory Efficiency", "Modern memory management",
             f"{label_b} uses ~25% less memory than {label_a} for same data."),
            ("Vertical Scaling", "Single instance, multiple cores",
             f"No need for {label_a} Cluster complexity on multi-core servers."),
            ("Drop-in Replacement", "Zero code changes",
             f"100% {label_a} protocol compatible - just point your app to {label_b}."),
        ]
        lines = []
        for number, (title, headline, detail) in enumerate(points, start=1):
            lines.append(colored(f"  {number}. ", "white") + colored(title, "green")
                         + colored(f" - {headline}", "dark_grey"))
            lines.append(colored(f"     {detail}", "dark_grey"))
            lines.append("")
        return lines

    def render(self, entries: List[ComparisonEntry], summary: RunSummary) -> None:
        """Print the full report."""
        for block in (self.format_comparison_table(entries),
                      self.format_bar_chart(entries),
                      self.format_summary(summary)):
            print()
            print(block)
        print()
