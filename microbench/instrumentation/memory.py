"""
Resident memory sampling for benchmark runs.

Samples the resident set size of the harness process at fixed points of a
module's lifecycle so the report can show how much memory the fixture and
the measured iterations pulled in.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import psutil

logger = logging.getLogger(__name__)


@dataclass
class MemorySamples:
    """Resident set size samples in kilobytes, keyed by lifecycle point."""

    samples: dict[str, int] = field(default_factory=dict)

    def delta_kb(self, start: str, end: str) -> Optional[int]:
        """Difference between two samples, or None if either is missing."""
        if start not in self.samples or end not in self.samples:
            return None
        return self.samples[end] - self.samples[start]

    def to_dict(self) -> dict:
        return dict(self.samples)


class MemoryProbe:
    """Takes RSS samples of the current process."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._process: Optional[psutil.Process] = None
        if enabled:
            self._process = psutil.Process()

    def rss_kb(self) -> Optional[int]:
        """Current resident set size in KB, None when sampling is off or fails."""
        if self._process is None:
            return None
        try:
            return self._process.memory_info().rss // 1024
        except psutil.Error as e:
            logger.warning("Memory sampling disabled: %s", e)
            self._process = None
            return None

    def sample(self, samples: MemorySamples, point: str) -> None:
        """Record the current RSS under ``point``."""
        value = self.rss_kb()
        if value is not None:
            samples.samples[point] = value
