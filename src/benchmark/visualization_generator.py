"""Generates visualizations from benchmark results."""
import logging
from pathlib import Path
from typing import List, Union

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

from .models import ComparisonEntry


# Configure logging
logger = logging.getLogger(__name__)


class VisualizationGenerator:
    """Generates visualizations from benchmark results."""

    COLOR_A = '#1f77b4'  # blue
    COLOR_B = '#c51b8a'  # magenta

    @staticmethod
    def _short_name(scenario_name: str) -> str:
        # "Concurrent SCAN (100K keys, 8 clients)" -> two-line tick label
        return scenario_name.replace(" (", "\n(")

    def plot_throughput(self, entries: List[ComparisonEntry], output_path: Union[Path, str]) -> None:
        """
        Generate and save a grouped bar chart of throughput per scenario.

        Args:
            entries: Comparison entries in scenario order.
            output_path: Path to save plot.
        """
        if not entries:
            logger.warning("No comparison results available. Skipping throughput plot.")
            return

        sns.set_theme(style="whitegrid")
        label_a = entries[0].endpoint_a.label
        label_b = entries[0].endpoint_b.label
        ops_a = [entry.result_a.throughput for entry in entries]
        ops_b = [entry.result_b.throughput for entry in entries]
        x = np.arange(len(entries))
        width = 0.35

        fig, ax = plt.subplots(figsize=(14, 7))
        bars_a = ax.bar(x - width/2, ops_a, width, label=label_a, color=self.COLOR_A)
        bars_b = ax.bar(x + width/2, ops_b, width, label=label_b, color=self.COLOR_B)
        # Scenarios differ by orders of magnitude
        ax.set_yscale('log')
        ax.set_title(f"Throughput: {label_a} vs {label_b}")
        ax.set_xticks(x)
        ax.set_xticklabels([self._short_name(entry.scenario_name) for entry in entries], fontsize=8)
        ax.set_ylabel("Operations per second (log scale)")
        ax.legend()

        for bars, values in ((bars_a, ops_a), (bars_b, ops_b)):
            for bar, val in zip(bars, values):
                ax.text(bar.get_x() + bar.get_width()/2, bar.get_height(), f'{val:,.0f}',
                        ha='center', va='bottom', fontsize=7)

        plt.tight_layout()
        plt.savefig(output_path)
        plt.close(fig)
        logger.info(f"Graph saved: {output_path}")

    def plot_speedups(self, entries: List[ComparisonEntry], output_path: Union[Path, str]) -> None:
        """
        Generate and save a horizontal bar chart of the winner's speedup per scenario.

        Args:
            entries: Comparison entries in scenario order.
            output_path: Path to save plot.
        """
        if not entries:
            logger.warning("No comparison results available. Skipping speedup plot.")
            return

        sns.set_theme(style="whitegrid")
        label_a = entries[0].endpoint_a.label
        names = [self._short_name(entry.scenario_name) for entry in entries]
        ratios = [entry.speedup_ratio for entry in entries]
        colors = [self.COLOR_A if entry.winner == label_a else self.COLOR_B for entry in entries]

        fig, ax = plt.subplots(figsize=(12, 7))
        y = np.arange(len(entries))
        ax.barh(y, ratios, color=colors)
        ax.set_yticks(y)
        ax.set_yticklabels(names, fontsize=8)
        ax.invert_yaxis()
        ax.axvline(1.0, color='black', linestyle='--', alpha=0.7)
        ax.set_xlabel("Speedup of the winner (x)")
        ax.set_title("Winner speedup per scenario")

        for pos, (ratio, entry) in enumerate(zip(ratios, entries)):
            ax.text(ratio, pos, f' {ratio:.1f}x {entry.winner}', va='center', fontsize=8)

        plt.tight_layout()
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"Speedup graph saved: {output_path}")
