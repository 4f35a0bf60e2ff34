"""
Results rendering for benchmark runs.

Provides the console listing, JSON export and matplotlib charts.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .aggregate import BenchmarkReport, summarize
from .errors import LoadError
from .loader import BenchmarkModule
from .runner import ModuleRun, SuiteResult


class ConsoleReporter:
    """Generates console/CLI reports."""

    def __init__(self, use_color: bool = True):
        self.use_color = use_color

    def _color(self, text: str, color: str) -> str:
        """Apply ANSI color if enabled."""
        if not self.use_color:
            return text

        colors = {
            "green": "\033[92m",
            "red": "\033[91m",
            "yellow": "\033[93m",
            "blue": "\033[94m",
            "bold": "\033[1m",
            "reset": "\033[0m",
        }

        return f"{colors.get(color, '')}{text}{colors['reset']}"

    def format_duration(self, seconds: Optional[float]) -> str:
        """Format a duration in seconds for display."""
        if seconds is None:
            return "n/a"
        if seconds < 1e-3:
            return f"{seconds * 1e6:.1f}us"
        if seconds < 1:
            return f"{seconds * 1000:.3f}ms"
        return f"{seconds:.3f}s"

    def format_report(self, report: BenchmarkReport) -> list[str]:
        """Statistic lines for one report."""
        lines = [f"  {'count:':<8} {report.count}"]
        lines.append(f"  {'total:':<8} {self.format_duration(report.total)}")
        lines.append(f"  {'mean:':<8} {self.format_duration(report.mean)}")
        lines.append(f"  {'min:':<8} {self.format_duration(report.min)}")
        lines.append(f"  {'max:':<8} {self.format_duration(report.max)}")
        if report.stdev is not None:
            lines.append(f"  {'stdev:':<8} {self.format_duration(report.stdev)}")
        return lines

    def module_result(self, run: ModuleRun) -> str:
        """Generate the listing for a single module."""
        status = self._color("ok", "green") if run.ok else self._color("failed", "red")
        lines = [f"{self._color(run.name, 'bold')}: {status}"]

        labels = sorted({r.label for r in run.results if r.label})
        if labels:
            lines.append(f"  {'label:':<8} {', '.join(labels)}")

        if run.report is not None:
            lines.extend(self.format_report(run.report))

        if run.memory.samples:
            delta = run.memory.delta_kb("before_setup", "after_setup")
            if delta is not None:
                lines.append(f"  {'fixture:':<8} {delta:+d}kb rss")

        if run.failure is not None:
            where = ""
            if run.failure.iteration is not None:
                where = f" (iteration {run.failure.iteration})"
            lines.append(
                f"  {self._color('error:', 'red')} {run.failure.kind}{where}: {run.failure.message}"
            )

        return "\n".join(lines)

    def render(
        self,
        suite: Sequence[BenchmarkModule],
        runs: Sequence[ModuleRun],
        load_errors: Sequence[LoadError] = (),
    ) -> str:
        """Render module results in suite order, then load errors."""
        by_module = {id(module): run for module, run in zip(suite, runs)}

        lines = [self._color("=" * 60, "blue")]
        lines.append(self._color("Benchmark Results", "bold"))
        lines.append(self._color("=" * 60, "blue"))

        for module in suite:
            run = by_module.get(id(module))
            if run is None:
                lines.append(f"{self._color(module.name, 'bold')}: not run")
                continue
            lines.append(self.module_result(run))

        if load_errors:
            lines.append(f"\n{self._color('Load errors:', 'red')}")
            for error in load_errors:
                lines.append(f"  - {error.source}: {error.kind}: {error}")

        failed = sum(1 for run in runs if not run.ok)
        ok = len(runs) - failed
        lines.append(self._color("-" * 60, "blue"))
        summary = f"{ok} ok, {failed} failed"
        if load_errors:
            summary += f", {len(load_errors)} not loaded"
        lines.append(summary)

        return "\n".join(lines)

    def comparison_table(self, runs: Sequence[ModuleRun]) -> str:
        """One row per module, for a compact side-by-side view."""
        if not runs:
            return "No results to display"

        headers = ["Module", "Status", "Count", "Mean", "Min", "Max", "Total"]
        col_widths = [22, 8, 7, 12, 12, 12, 12]

        lines = []
        header_row = ""
        for i, header in enumerate(headers):
            header_row += f"{header:<{col_widths[i]}}"
        lines.append(self._color(header_row, "bold"))
        lines.append("-" * sum(col_widths))

        for run in runs:
            report = run.report or summarize([])
            name = run.name[:19] + "..." if len(run.name) > 22 else run.name
            row = [
                f"{name:<{col_widths[0]}}",
                f"{'ok' if run.ok else 'failed':<{col_widths[1]}}",
                f"{report.count:<{col_widths[2]}}",
                f"{self.format_duration(report.mean):<{col_widths[3]}}",
                f"{self.format_duration(report.min):<{col_widths[4]}}",
                f"{self.format_duration(report.max):<{col_widths[5]}}",
                f"{self.format_duration(report.total):<{col_widths[6]}}",
            ]
            lines.append("".join(row))

        return "\n".join(lines)


def render(
    suite: Sequence[BenchmarkModule],
    runs: Sequence[ModuleRun],
    load_errors: Sequence[LoadError] = (),
    use_color: bool = False,
) -> str:
    """Human-readable listing of a suite run, in suite order."""
    return ConsoleReporter(use_color=use_color).render(suite, runs, load_errors)


class ChartReporter:
    """Generates visual charts using matplotlib."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir or Path("results/charts")

    def duration_distribution(
        self,
        run: ModuleRun,
        filename: Optional[str] = None,
    ) -> Optional[Path]:
        """Histogram of one module's iteration durations."""
        import matplotlib
        matplotlib.use("Agg")  # Non-interactive backend
        import matplotlib.pyplot as plt

        durations = [r.duration_ms for r in run.results]
        if not durations:
            return None

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.hist(durations, bins=min(20, len(durations)), edgecolor="black", alpha=0.7)
        if run.report is not None and run.report.mean is not None:
            ax.axvline(
                run.report.mean * 1000,
                color="r",
                linestyle="--",
                label=f"mean: {run.report.mean * 1000:.3f}ms",
            )
            ax.legend()

        ax.set_xlabel("Duration (ms)")
        ax.set_ylabel("Count")
        ax.set_title(f"Iteration Durations: {run.name}")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / (filename or f"{run.name}_durations.png")
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        plt.close(fig)

        return filepath

    def comparison_bar_chart(
        self,
        runs: Sequence[ModuleRun],
        filename: Optional[str] = None,
    ) -> Optional[Path]:
        """Bar chart of mean iteration time per module that produced a report."""
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        import numpy as np

        reported = [r for r in runs if r.report is not None and r.report.mean is not None]
        if not reported:
            return None

        names = [r.name for r in reported]
        means = [r.report.mean * 1000 for r in reported]
        mins = [r.report.min * 1000 for r in reported]
        maxs = [r.report.max * 1000 for r in reported]

        x = np.arange(len(names))
        lower = np.array(means) - np.array(mins)
        upper = np.array(maxs) - np.array(means)

        fig, ax = plt.subplots(figsize=(12, 6))
        ax.bar(x, means, yerr=[lower, upper], capsize=4, color="steelblue")

        ax.set_xlabel("Module")
        ax.set_ylabel("Mean iteration time (ms)")
        ax.set_title("Benchmark Comparison")
        ax.set_xticks(x)
        ax.set_xticklabels(names, rotation=45, ha="right")

        fig.tight_layout()

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / (filename or "comparison_bar_chart.png")
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        plt.close(fig)

        return filepath


class JSONReporter:
    """Exports results as JSON for further analysis."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir or Path("results")

    def save_suite(self, result: SuiteResult, name: str = "suite") -> Path:
        """Save a suite result to a timestamped JSON file."""
        started = result.start_time or datetime.now()
        timestamp = started.strftime("%Y%m%d_%H%M%S")
        filepath = self.output_dir / f"{name}_{timestamp}.json"
        result.save(filepath)
        return filepath

    def load_result(self, filepath: Path) -> dict:
        """Load a result from JSON."""
        with open(filepath) as f:
            return json.load(f)
