"""Live dashboard repeating a quick SET benchmark against both endpoints."""
import asyncio
import logging
from collections import deque
from typing import List, Optional

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.gridspec import GridSpec

from .models import BenchmarkConfig, LiveAccumulator, LiveSample
from .constants import BenchmarkConstants
from .client_pool_manager import ClientPoolManager
from .scenario_runner import ScenarioRunner
from .comparator import Comparator
from .exceptions import BenchmarkExecutionError


# Configure logging
logger = logging.getLogger(__name__)


def update_accumulator(acc: LiveAccumulator, sample: LiveSample,
                       window: int = BenchmarkConstants.LIVE_WINDOW) -> LiveAccumulator:
    """
    Fold one iteration's sample into a new accumulator.

    The input accumulator is left untouched. Endpoint A wins exact ties,
    matching the batch comparator. Only the last ``window`` samples are
    kept for the line chart.

    Args:
        acc: State after the previous iteration.
        sample: Throughput of both endpoints for this iteration.
        window: Number of samples kept in the history.

    Returns:
        The updated accumulator.
    """
    iteration = acc.iteration + 1
    b_wins = sample.b_ops > sample.a_ops
    return LiveAccumulator(
        iteration=iteration,
        total_a=acc.total_a + sample.a_ops,
        total_b=acc.total_b + sample.b_ops,
        wins_a=acc.wins_a + (0 if b_wins else 1),
        wins_b=acc.wins_b + (1 if b_wins else 0),
        last=sample,
        iterations=(acc.iterations + (iteration,))[-window:],
        history_a=(acc.history_a + (sample.a_ops,))[-window:],
        history_b=(acc.history_b + (sample.b_ops,))[-window:],
    )


def describe_sample(sample: LiveSample, label_a: str, label_b: str) -> str:
    """Activity log line for one iteration."""
    if sample.b_ops > sample.a_ops:
        winner, ratio = label_b, Comparator.speedup_ratio(sample.b_ops, sample.a_ops)
    else:
        winner, ratio = label_a, Comparator.speedup_ratio(sample.a_ops, sample.b_ops)
    return f"{winner} wins! ({ratio * 100 - 100:.1f}% faster)"


def stats_rows(acc: LiveAccumulator) -> List[List[str]]:
    """Rows of the statistics table, throughput in K ops/s."""
    if acc.iteration == 0 or acc.last is None:
        return [
            ["Last (K ops/s)", "-", "-"],
            ["Avg (K ops/s)", "-", "-"],
            ["Wins", "0", "0"],
            ["Win Rate", "-", "-"],
        ]
    return [
        ["Last (K ops/s)", f"{acc.last.a_ops / 1000:.1f}", f"{acc.last.b_ops / 1000:.1f}"],
        ["Avg (K ops/s)", f"{acc.average_a / 1000:.0f}", f"{acc.average_b / 1000:.0f}"],
        ["Wins", str(acc.wins_a), str(acc.wins_b)],
        ["Win Rate", f"{acc.win_rate_a * 100:.0f}%", f"{acc.win_rate_b * 100:.0f}%"],
    ]


class LiveDashboard:
    """Matplotlib window refreshed every ``live_interval`` seconds. Press 'q' to quit."""

    LOG_LINES = 12

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.pool_manager = ClientPoolManager(config)
        self.scenario_runner = ScenarioRunner(config, self.pool_manager)
        self.accumulator = LiveAccumulator()
        self.activity = deque(maxlen=self.LOG_LINES)
        self.halted = False
        self.clients = []
        self.loop = asyncio.new_event_loop()
        self.animation: Optional[FuncAnimation] = None

    def log(self, message: str) -> None:
        self.activity.append(message)
        logger.info(message)

    async def connect(self) -> None:
        """Open one persistent connection per endpoint."""
        for endpoint in self.config.endpoints:
            self.clients.append(await self.pool_manager.open_client(endpoint))
            self.log(f"Connected to {endpoint.label}")

    async def disconnect(self) -> None:
        for client, endpoint in zip(self.clients, self.config.endpoints):
            await self.pool_manager.close_client(client, endpoint)
        self.clients = []

    async def measure_once(self) -> LiveSample:
        """Run the quick SET pipeline on A, then on B."""
        results = []
        for client, endpoint in zip(self.clients, self.config.endpoints):
            results.append(await self.scenario_runner.quick_set(
                client, endpoint, self.config.live_ops, self.config.live_value_size))
        return LiveSample(a_ops=results[0].throughput, b_ops=results[1].throughput)

    def _build_figure(self):
        label_a, label_b = self.config.endpoint_a.label, self.config.endpoint_b.label
        fig = plt.figure(figsize=(16, 9))
        grid = GridSpec(12, 12, figure=fig, hspace=1.2, wspace=1.0)
        fig.suptitle(f"{label_a.upper()} vs {label_b.upper()} - LIVE BENCHMARK DASHBOARD",
                     fontsize=14, fontweight='bold')
        self.line_ax = fig.add_subplot(grid[0:6, 0:8])
        self.bar_ax = fig.add_subplot(grid[0:6, 8:12])
        self.donut_ax = fig.add_subplot(grid[6:11, 0:4])
        self.table_ax = fig.add_subplot(grid[6:11, 4:8])
        self.log_ax = fig.add_subplot(grid[6:11, 8:12])
        ep_a, ep_b = self.config.endpoint_a, self.config.endpoint_b
        fig.text(0.5, 0.02,
                 f"{label_a}: {ep_a.address}  |  {label_b}: {ep_b.address}  |  Press 'q' to quit",
                 ha='center', fontsize=10)
        return fig

    def _draw(self) -> None:
        acc = self.accumulator
        label_a, label_b = self.config.endpoint_a.label, self.config.endpoint_b.label

        self.line_ax.clear()
        self.line_ax.set_title("Operations per Second (Live)")
        self.line_ax.set_ylabel("K ops/s")
        if acc.iterations:
            self.line_ax.plot(acc.iterations, [v / 1000 for v in acc.history_a], color='tab:blue', label=label_a)
            self.line_ax.plot(acc.iterations, [v / 1000 for v in acc.history_b], color='m', label=label_b)
            self.line_ax.legend(loc='upper right')
        self.line_ax.grid(True, alpha=0.3)

        self.bar_ax.clear()
        self.bar_ax.set_title("Average Performance (K ops/s)")
        self.bar_ax.bar([label_a, label_b], [acc.average_a / 1000, acc.average_b / 1000],
                        color=['tab:blue', 'm'])

        self.donut_ax.clear()
        self.donut_ax.set_title("Benchmark Wins")
        shares = [acc.win_rate_a, acc.win_rate_b] if acc.iteration else [0.5, 0.5]
        self.donut_ax.pie(shares, labels=[label_a, label_b], colors=['tab:blue', 'm'],
                          wedgeprops=dict(width=0.35), startangle=90)

        self.table_ax.clear()
        self.table_ax.set_title("Statistics")
        self.table_ax.axis('off')
        self.table_ax.table(cellText=stats_rows(acc), colLabels=["Metric", label_a, label_b], loc='center')

        self.log_ax.clear()
        self.log_ax.set_title("Activity Log")
        self.log_ax.axis('off')
        self.log_ax.text(0.0, 1.0, "\n".join(self.activity), va='top', family='monospace', fontsize=8,
                         color='darkred' if self.halted else 'darkgreen')

    def _step(self, _frame) -> None:
        if self.halted:
            return
        self.log(f"Running iteration {self.accumulator.iteration + 1}...")
        try:
            sample = self.loop.run_until_complete(self.measure_once())
        except BenchmarkExecutionError as e:
            self.log(f"Error: {e}")
            self.log("Stopped. Restart the dashboard once both servers are up.")
            self.halted = True
            if self.animation is not None:
                self.animation.event_source.stop()
        else:
            self.accumulator = update_accumulator(self.accumulator, sample)
            self.log(describe_sample(sample, self.config.endpoint_a.label, self.config.endpoint_b.label))
        self._draw()

    def run(self) -> None:
        """Open the window and refresh until 'q' is pressed or the window closes."""
        fig = self._build_figure()

        def on_key(event):
            if event.key == 'q':
                plt.close(fig)

        fig.canvas.mpl_connect('key_press_event', on_key)

        try:
            self.loop.run_until_complete(self.connect())
        except BenchmarkExecutionError as e:
            self.log(f"Error: {e}")
            self.log("Make sure both databases are running!")
            self.halted = True

        self._draw()
        if not self.halted:
            self.animation = FuncAnimation(fig, self._step, interval=int(self.config.live_interval * 1000),
                                           cache_frame_data=False)
        try:
            plt.show()
        finally:
            self.loop.run_until_complete(self.disconnect())
            self.loop.close()
