"""
Reduction of raw iteration timings into summary statistics.
"""

from dataclasses import asdict, dataclass
from typing import Optional, Sequence

from ..instrumentation.timing import DurationCollector, IterationResult


@dataclass(frozen=True)
class BenchmarkReport:
    """Aggregate over one module's iteration results.

    All durations are in seconds. Everything except ``count`` and ``total``
    is None for an empty report; ``stdev`` needs at least two iterations.
    """

    count: int
    total: float
    mean: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    median: Optional[float] = None
    p95: Optional[float] = None
    stdev: Optional[float] = None

    @property
    def empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> dict:
        return asdict(self)


def summarize(results: Sequence[IterationResult]) -> BenchmarkReport:
    """Build a report from iteration results; an empty sequence is valid."""
    collector = DurationCollector()
    for result in results:
        collector.add(result)
    return BenchmarkReport(**collector.stats())
