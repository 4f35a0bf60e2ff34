"""
Benchmark orchestrator.

Drives each loaded module through its lifecycle

    LOADED -> INITIALIZED -> READY -> RUNNING -> COMPLETED

with FAILED reachable from every non-terminal state, times every run()
call and collects the results. Modules run strictly one after another and
every harness error is contained at the module boundary.
"""

import json
import logging
import math
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from ..instrumentation.memory import MemoryProbe, MemorySamples
from ..instrumentation.timing import IterationResult, Timer, measure
from ..instrumentation.traces import Tracer
from .aggregate import BenchmarkReport, summarize
from .errors import (
    BenchmarkError,
    BenchmarkRuntimeError,
    ConfigurationError,
    LoadError,
    TimeBudgetExceeded,
)
from .loader import BenchmarkModule

logger = logging.getLogger(__name__)


class ModuleState(Enum):
    """Lifecycle states of a module run."""

    LOADED = "loaded"
    INITIALIZED = "initialized"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def parse_override(pair: str) -> tuple[str, Any]:
    """Parse a ``NAME=VALUE`` override.

    VALUE is read as JSON when possible (numbers, booleans, lists), otherwise
    kept as a plain string.
    """
    name, sep, raw = pair.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ConfigurationError(f"override must look like NAME=VALUE, got {pair!r}")
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw
    return name, value


def parse_overrides(pairs: Iterable[str]) -> dict:
    """Parse several ``NAME=VALUE`` overrides; later ones win."""
    return dict(parse_override(pair) for pair in pairs)


@dataclass
class BenchmarkConfig:
    """Harness-wide settings for a suite run."""

    multiplier: int = 1
    warmup_runs: int = 0
    fresh_fixture: bool = False
    time_budget_seconds: Optional[float] = None
    overrides: dict = field(default_factory=dict)
    track_memory: bool = True
    verbose: bool = False

    def __post_init__(self):
        if isinstance(self.multiplier, bool) or not isinstance(self.multiplier, int):
            raise ConfigurationError(f"multiplier must be an integer, got {self.multiplier!r}")
        if self.multiplier < 1:
            raise ConfigurationError(f"multiplier must be >= 1, got {self.multiplier}")
        if self.warmup_runs < 0:
            raise ConfigurationError(f"warmup_runs must be >= 0, got {self.warmup_runs}")
        if self.time_budget_seconds is not None and (
            not math.isfinite(self.time_budget_seconds) or self.time_budget_seconds <= 0
        ):
            raise ConfigurationError(
                f"time_budget_seconds must be positive, got {self.time_budget_seconds}"
            )

    @classmethod
    def from_env(cls, **kwargs) -> "BenchmarkConfig":
        """Build a config from MICROBENCH_* environment variables.

        Keyword arguments that are not None take precedence over the
        environment.
        """
        values = {
            "multiplier": _env_int("MICROBENCH_MULTIPLIER", 1),
            "warmup_runs": _env_int("MICROBENCH_WARMUP_RUNS", 0),
            "fresh_fixture": _env_bool("MICROBENCH_FRESH_FIXTURE", False),
            "time_budget_seconds": _env_float("MICROBENCH_TIME_BUDGET"),
        }
        values.update({k: v for k, v in kwargs.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "multiplier": self.multiplier,
            "warmup_runs": self.warmup_runs,
            "fresh_fixture": self.fresh_fixture,
            "time_budget_seconds": self.time_budget_seconds,
            "overrides": self.overrides,
            "track_memory": self.track_memory,
        }


@dataclass
class ModuleFailure:
    """Why a module ended in FAILED."""

    kind: str
    message: str
    state: ModuleState
    iteration: Optional[int] = None
    phase: Optional[str] = None

    @classmethod
    def from_error(cls, error: BenchmarkError, state: ModuleState) -> "ModuleFailure":
        return cls(
            kind=error.kind,
            message=str(error),
            state=state,
            iteration=getattr(error, "iteration", None),
            phase=getattr(error, "phase", None),
        )

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "message": self.message,
            "state": self.state.value,
            "iteration": self.iteration,
            "phase": self.phase,
        }


@dataclass
class ModuleRun:
    """Outcome of driving one module through its lifecycle."""

    name: str
    source: str
    state: ModuleState = ModuleState.LOADED
    iterations: int = 0
    results: list[IterationResult] = field(default_factory=list)
    failure: Optional[ModuleFailure] = None
    report: Optional[BenchmarkReport] = None
    memory: MemorySamples = field(default_factory=MemorySamples)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def ok(self) -> bool:
        return self.state is ModuleState.COMPLETED

    def to_dict(self) -> dict:
        """Convert result to dictionary for serialization."""
        return {
            "name": self.name,
            "source": self.source,
            "status": "ok" if self.ok else "failed",
            "state": self.state.value,
            "iterations": self.iterations,
            "results": [r.to_dict() for r in self.results],
            "report": self.report.to_dict() if self.report else None,
            "failure": self.failure.to_dict() if self.failure else None,
            "memory_kb": self.memory.to_dict(),
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


@dataclass
class SuiteResult:
    """Outcome of a whole suite run, in suite order."""

    runs: list[ModuleRun]
    load_errors: list[LoadError] = field(default_factory=list)
    config: Optional[BenchmarkConfig] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def failed(self) -> list[ModuleRun]:
        return [run for run in self.runs if not run.ok]

    @property
    def ok(self) -> bool:
        return not self.failed and not self.load_errors

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        return {
            "config": self.config.to_dict() if self.config else None,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "ok": self.ok,
            "modules": [run.to_dict() for run in self.runs],
            "load_errors": [e.to_dict() for e in self.load_errors],
        }

    def save(self, path: Path) -> None:
        """Save results to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


class BenchmarkRunner:
    """Runs benchmark modules one at a time."""

    def __init__(
        self,
        config: Optional[BenchmarkConfig] = None,
        tracer: Optional[Tracer] = None,
        memory_probe: Optional[MemoryProbe] = None,
    ):
        self.config = config or BenchmarkConfig()
        self.tracer = tracer or Tracer()
        self.memory_probe = memory_probe or MemoryProbe(enabled=self.config.track_memory)

    def _span_attributes(self, module: BenchmarkModule, **extra) -> dict:
        attributes = {"benchmark.module": module.name}
        attributes.update({f"benchmark.{k}": v for k, v in extra.items()})
        return attributes

    def _rebuild_fixture(self, module: BenchmarkModule, index: int) -> None:
        with self.tracer.span("setup", self._span_attributes(module, iteration=index)):
            module.setup()

    def _warmup(self, module: BenchmarkModule, fresh: bool) -> None:
        for i in range(1, self.config.warmup_runs + 1):
            if self.config.verbose:
                print(f"  Warmup {i}/{self.config.warmup_runs}...", end="", flush=True)
            try:
                module.run()
            except Exception as e:
                if self.config.verbose:
                    print(f" error: {e}")
                raise BenchmarkRuntimeError(
                    f"run() failed during warmup {i}: {type(e).__name__}: {e}",
                    iteration=i,
                    phase="warmup",
                ) from e
            if self.config.verbose:
                print(" done")
            if fresh:
                self._rebuild_fixture(module, 0)

    def _measure_iterations(
        self,
        module: BenchmarkModule,
        run: ModuleRun,
        fresh: bool,
    ) -> None:
        budget = self.config.time_budget_seconds
        budget_timer = Timer(f"{module.name}_budget").start()

        for index in range(1, run.iterations + 1):
            if index > 1:
                if budget is not None and budget_timer.elapsed > budget:
                    raise TimeBudgetExceeded(
                        f"time budget of {budget}s exceeded after {index - 1} "
                        f"of {run.iterations} iteration(s)",
                        iteration=index - 1,
                    )
                if fresh:
                    self._rebuild_fixture(module, index)

            if self.config.verbose:
                print(f"  Run {index}/{run.iterations}...", end="", flush=True)
            try:
                with self.tracer.span("run", self._span_attributes(module, iteration=index)):
                    duration, label = measure(module.run, module.name)
            except Exception as e:
                if self.config.verbose:
                    print(f" error: {e}")
                raise BenchmarkRuntimeError(
                    f"run() failed on iteration {index}: {type(e).__name__}: {e}",
                    iteration=index,
                ) from e

            run.results.append(IterationResult(index=index, duration=duration, label=label))
            if self.config.verbose:
                print(f" {duration * 1000:.3f}ms")

    def run_module(self, module: BenchmarkModule) -> ModuleRun:
        """Drive one module through init, setup and N measured iterations."""
        run = ModuleRun(name=module.name, source=module.source, start_time=datetime.now())

        if self.config.verbose:
            print(f"\nRunning benchmark: {module.name}")

        try:
            with self.tracer.span("init", self._span_attributes(module)):
                module.init(self.config.overrides)
            run.state = ModuleState.INITIALIZED
            logger.debug("%s: initialized with %r", module.name, module.config)

            declared = module.iterations()
            iterations = declared * self.config.multiplier
            run.iterations = iterations
            fresh = self.config.fresh_fixture or bool(module.config.get("fresh_fixture", False))

            self.memory_probe.sample(run.memory, "before_setup")
            with self.tracer.span("setup", self._span_attributes(module)):
                module.setup()
            self.memory_probe.sample(run.memory, "after_setup")
            run.state = ModuleState.READY
            logger.debug("%s: ready, %d iteration(s)", module.name, iterations)

            if self.config.verbose:
                print(f"  Iterations: {iterations} (declared {declared} x {self.config.multiplier})")

            if fresh:
                logger.debug("%s: rebuilding fixture before every iteration", module.name)
            self._warmup(module, fresh)

            run.state = ModuleState.RUNNING
            self._measure_iterations(module, run, fresh)
            run.state = ModuleState.COMPLETED
        except BenchmarkError as e:
            run.failure = ModuleFailure.from_error(e, run.state)
            run.state = ModuleState.FAILED
            logger.warning("%s failed (%s): %s", module.name, e.kind, e)
        finally:
            if run.results:
                self.memory_probe.sample(run.memory, "after_run")
            module.release()
            run.end_time = datetime.now()

        if run.results:
            run.report = summarize(run.results)

        return run

    def run_suite(
        self,
        suite: Sequence[BenchmarkModule],
        load_errors: Sequence[LoadError] = (),
    ) -> SuiteResult:
        """Run every module of ``suite`` in order."""
        result = SuiteResult(
            runs=[],
            load_errors=list(load_errors),
            config=self.config,
            start_time=datetime.now(),
        )

        for module in suite:
            result.runs.append(self.run_module(module))

        result.end_time = datetime.now()
        logger.info(
            "Suite finished: %d ok, %d failed, %d load error(s)",
            len(result.runs) - len(result.failed),
            len(result.failed),
            len(result.load_errors),
        )
        return result
