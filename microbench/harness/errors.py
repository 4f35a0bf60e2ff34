"""
Error taxonomy for the benchmark harness.

Every error raised at a module boundary is one of these. The runner turns
them into per-module failure records; none of them aborts a suite run.
"""

from typing import Optional, Sequence


class BenchmarkError(Exception):
    """Base class for harness errors."""

    kind = "BenchmarkError"


class LoadError(BenchmarkError):
    """A source could not be imported or lacks required entry points."""

    kind = "LoadError"

    def __init__(
        self,
        source: str,
        message: str,
        missing: Sequence[str] = (),
    ):
        super().__init__(message)
        self.source = source
        self.missing = list(missing)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "source": self.source,
            "message": str(self),
            "missing": self.missing,
        }


class ConfigurationError(BenchmarkError):
    """Bad or missing output from init/get_iterations, or bad harness settings."""

    kind = "ConfigurationError"


class SetupError(BenchmarkError):
    """Fixture construction failed."""

    kind = "SetupError"


class BenchmarkRuntimeError(BenchmarkError):
    """A run() invocation raised."""

    kind = "RuntimeError"

    def __init__(self, message: str, iteration: Optional[int] = None, phase: str = "run"):
        super().__init__(message)
        self.iteration = iteration
        self.phase = phase


class TimeBudgetExceeded(BenchmarkRuntimeError):
    """The module used up its wall-clock budget between two iterations."""

    kind = "TimeBudgetExceeded"
