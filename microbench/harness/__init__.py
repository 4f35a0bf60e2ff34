"""
Benchmark harness for micro-benchmark modules.

Provides discovery, orchestration and reporting capabilities.
"""

from .errors import (
    BenchmarkError,
    LoadError,
    ConfigurationError,
    SetupError,
    BenchmarkRuntimeError,
    TimeBudgetExceeded,
)

from .loader import (
    BenchmarkModule,
    ModuleConfig,
    REQUIRED_ENTRY_POINTS,
    discover,
    load_source,
)

from .aggregate import (
    BenchmarkReport,
    summarize,
)

from .runner import (
    BenchmarkConfig,
    BenchmarkRunner,
    ModuleFailure,
    ModuleRun,
    ModuleState,
    SuiteResult,
    parse_overrides,
)

from .reporter import (
    ConsoleReporter,
    ChartReporter,
    JSONReporter,
    render,
)

__all__ = [
    # Errors
    "BenchmarkError",
    "LoadError",
    "ConfigurationError",
    "SetupError",
    "BenchmarkRuntimeError",
    "TimeBudgetExceeded",
    # Loader
    "BenchmarkModule",
    "ModuleConfig",
    "REQUIRED_ENTRY_POINTS",
    "discover",
    "load_source",
    # Aggregation
    "BenchmarkReport",
    "summarize",
    # Runner
    "BenchmarkConfig",
    "BenchmarkRunner",
    "ModuleFailure",
    "ModuleRun",
    "ModuleState",
    "SuiteResult",
    "parse_overrides",
    # Reporter
    "ConsoleReporter",
    "ChartReporter",
    "JSONReporter",
    "render",
]
