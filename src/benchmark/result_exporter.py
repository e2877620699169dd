"""Handles exporting benchmark results to CSV and loading them back."""
import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from .models import ComparisonEntry, Endpoint, ScenarioResult
from .exceptions import ResultLoadError


# Configure logging
logger = logging.getLogger(__name__)


class ResultExporter:
    """Handles exporting benchmark results to various formats."""

    COLUMNS = [
        "scenario",
        "a_label", "a_host", "a_port", "a_duration_s", "a_total_ops", "a_ops_per_sec",
        "b_label", "b_host", "b_port", "b_duration_s", "b_total_ops", "b_ops_per_sec",
        "winner", "speedup_ratio",
    ]

    @staticmethod
    def to_dataframe(entries: List[ComparisonEntry]) -> pd.DataFrame:
        """Flatten comparison entries into one row per scenario."""
        rows = []
        for entry in entries:
            rows.append({
                "scenario": entry.scenario_name,
                "a_label": entry.endpoint_a.label,
                "a_host": entry.endpoint_a.host,
                "a_port": entry.endpoint_a.port,
                "a_duration_s": entry.result_a.duration,
                "a_total_ops": entry.result_a.total_operations,
                "a_ops_per_sec": entry.result_a.throughput,
                "b_label": entry.endpoint_b.label,
                "b_host": entry.endpoint_b.host,
                "b_port": entry.endpoint_b.port,
                "b_duration_s": entry.result_b.duration,
                "b_total_ops": entry.result_b.total_operations,
                "b_ops_per_sec": entry.result_b.throughput,
                "winner": entry.winner,
                "speedup_ratio": entry.speedup_ratio,
            })
        return pd.DataFrame(rows, columns=ResultExporter.COLUMNS)

    @staticmethod
    def save_results(entries: List[ComparisonEntry], output_path: Union[Path, str]) -> None:
        """
        Save comparison entries to CSV.

        Args:
            entries: Comparison entries in scenario order.
            output_path: Path to save CSV.
        """
        if not entries:
            logger.warning("No comparison results available for saving")
            return
        df = ResultExporter.to_dataframe(entries)
        df.to_csv(output_path, index=False)
        logger.info(f"CSV saved: {output_path}")

    @staticmethod
    def load_results(input_path: Union[Path, str]) -> List[ComparisonEntry]:
        """
        Load comparison entries from CSV without contacting any server.

        Args:
            input_path: Path to load CSV from.

        Returns:
            Comparison entries in the order they were saved.

        Raises:
            ResultLoadError: If the file is missing or lacks required columns.
        """
        if not Path(input_path).exists():
            raise ResultLoadError(f"Results file not found: {input_path}")

        df = pd.read_csv(input_path)
        missing = [column for column in ResultExporter.COLUMNS if column not in df.columns]
        if missing:
            raise ResultLoadError(f"Results file {input_path} is missing columns: {', '.join(missing)}")

        entries = []
        for _, row in df.iterrows():
            entries.append(ComparisonEntry(
                scenario_name=str(row["scenario"]),
                endpoint_a=Endpoint(label=str(row["a_label"]), host=str(row["a_host"]), port=int(row["a_port"])),
                endpoint_b=Endpoint(label=str(row["b_label"]), host=str(row["b_host"]), port=int(row["b_port"])),
                result_a=ScenarioResult(
                    duration=float(row["a_duration_s"]),
                    total_operations=int(row["a_total_ops"]),
                    throughput=float(row["a_ops_per_sec"]),
                ),
                result_b=ScenarioResult(
                    duration=float(row["b_duration_s"]),
                    total_operations=int(row["b_total_ops"]),
                    throughput=float(row["b_ops_per_sec"]),
                ),
                winner=str(row["winner"]),
                speedup_ratio=float(row["speedup_ratio"]),
            ))

        logger.info(f"Results loaded from CSV: {input_path}")
        return entries
