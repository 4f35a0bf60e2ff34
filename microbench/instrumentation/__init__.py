"""
Instrumentation module for micro-benchmarking.

Provides timing, memory sampling, tracing and logging setup.
"""

from .timing import (
    Timer,
    IterationResult,
    DurationCollector,
    timed,
    measure,
    percentile,
)

from .memory import (
    MemoryProbe,
    MemorySamples,
)

from .traces import (
    Tracer,
    TracingConfig,
)

from .log_config import setup_logger

__all__ = [
    # Timing
    "Timer",
    "IterationResult",
    "DurationCollector",
    "timed",
    "measure",
    "percentile",
    # Memory
    "MemoryProbe",
    "MemorySamples",
    # Tracing
    "Tracer",
    "TracingConfig",
    # Logging
    "setup_logger",
]
