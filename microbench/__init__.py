"""
microbench - a harness for fixed-format micro-benchmark modules.

Key modules:
- benchmarks: Bundled benchmark modules (fibonacci, factorial, smoothing, bubble sort)
- instrumentation: Timing, memory sampling, tracing and logging setup
- harness: Discovery, orchestration and reporting
- scenarios: Bundled suite definitions
"""

__version__ = "0.1.0"

from . import benchmarks
from . import instrumentation
from . import harness
from . import scenarios

__all__ = [
    "benchmarks",
    "instrumentation",
    "harness",
    "scenarios",
]
