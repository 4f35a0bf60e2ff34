"""
Timing utilities for micro-benchmarking.

Provides a monotonic timer, a context manager and the ``measure`` helper
used by the runner to time a single ``run()`` call, plus a collector that
aggregates durations across iterations.
"""

import math
import statistics
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional


@dataclass(frozen=True)
class IterationResult:
    """One measured execution of a module's run()."""

    index: int
    duration: float  # seconds
    label: Optional[str] = None

    @property
    def duration_ms(self) -> float:
        """Duration in milliseconds."""
        return self.duration * 1000

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "index": self.index,
            "duration": self.duration,
            "label": self.label,
        }


class Timer:
    """Simple timer for manual timing control.

    Uses ``time.perf_counter``, which is monotonic and unaffected by system
    clock adjustments.
    """

    def __init__(self, name: str = "timer"):
        self.name = name
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self._running = False

    def start(self) -> "Timer":
        """Start the timer."""
        self.start_time = time.perf_counter()
        self._running = True
        return self

    def stop(self) -> "Timer":
        """Stop the timer."""
        self.end_time = time.perf_counter()
        self._running = False
        return self

    @property
    def running(self) -> bool:
        return self._running

    @property
    def elapsed(self) -> float:
        """Elapsed time in seconds, never negative."""
        end = self.end_time if not self._running else time.perf_counter()
        return max(0.0, end - self.start_time)

    @property
    def elapsed_ms(self) -> float:
        """Elapsed time in milliseconds."""
        return self.elapsed * 1000


@contextmanager
def timed(name: str = "operation") -> Iterator[Timer]:
    """Context manager for timing synchronous operations.

    Usage:
        with timed("my_operation") as timer:
            # do work
        print(f"Elapsed: {timer.elapsed_ms}ms")
    """
    timer = Timer(name).start()
    try:
        yield timer
    finally:
        timer.stop()


def measure(unit: Callable[[], Any], name: str = "run") -> tuple[float, Any]:
    """Invoke ``unit`` exactly once and time it.

    Returns ``(duration_seconds, return_value)``. Exceptions raised by
    ``unit`` propagate unchanged.
    """
    with timed(name) as timer:
        value = unit()
    return timer.elapsed, value


def percentile(values: list[float], p: float) -> Optional[float]:
    """Linear-interpolated percentile; ``None`` for an empty list."""
    if not values:
        return None
    sorted_values = sorted(values)
    k = (len(sorted_values) - 1) * (p / 100)
    f = math.floor(k)
    c = f + 1 if f + 1 < len(sorted_values) else f
    return sorted_values[f] + (k - f) * (sorted_values[c] - sorted_values[f])


class DurationCollector:
    """Collects iteration results for one module run."""

    def __init__(self):
        self.results: list[IterationResult] = []

    def add(self, result: IterationResult) -> None:
        """Append a result."""
        self.results.append(result)

    def clear(self) -> None:
        """Clear all collected results."""
        self.results.clear()

    @property
    def count(self) -> int:
        return len(self.results)

    def durations(self) -> list[float]:
        """All durations in seconds, in iteration order."""
        return [r.duration for r in self.results]

    def stats(self) -> dict:
        """Calculate aggregate statistics.

        Statistics other than ``count`` and ``total`` are ``None`` when no
        result was collected.
        """
        durations = self.durations()
        count = len(durations)
        total = math.fsum(durations)

        if not durations:
            return {
                "count": 0,
                "total": 0.0,
                "mean": None,
                "min": None,
                "max": None,
                "median": None,
                "p95": None,
                "stdev": None,
            }

        return {
            "count": count,
            "total": total,
            "mean": total / count,
            "min": min(durations),
            "max": max(durations),
            "median": statistics.median(durations),
            "p95": percentile(durations, 95),
            "stdev": statistics.stdev(durations) if count > 1 else None,
        }
