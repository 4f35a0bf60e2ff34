"""
Shared pytest fixtures for the microbench test suite.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "runner"        # Run only runner tests
"""

import sys
import textwrap
from collections import Counter
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from microbench.harness import BenchmarkConfig, BenchmarkRunner
from microbench.instrumentation import MemoryProbe


class CountingModule:
    """In-memory benchmark module that counts lifecycle calls."""

    def __init__(
        self,
        name="counting",
        iterations=3,
        fail_on=None,
        init_error=None,
        setup_error=None,
        extra_config=None,
    ):
        self.name = name
        self.iterations_value = iterations
        self.fail_on = fail_on
        self.init_error = init_error
        self.setup_error = setup_error
        self.extra_config = extra_config or {}
        self.calls = Counter()
        self.fixtures_seen = []

    def init(self):
        self.calls["init"] += 1
        if self.init_error:
            raise self.init_error
        return {"iterations": self.iterations_value, **self.extra_config}

    def get_iterations(self, config):
        return config.require("iterations")

    def setup(self, config):
        self.calls["setup"] += 1
        if self.setup_error:
            raise self.setup_error
        return [3, 2, 1]

    def run(self, config, fixture):
        self.calls["run"] += 1
        self.fixtures_seen.append(list(fixture))
        fixture.sort()
        if self.fail_on is not None and self.calls["run"] == self.fail_on:
            raise ValueError("boom")
        return f"{self.name}()"


@pytest.fixture
def counting_module():
    """Factory for CountingModule instances."""
    return CountingModule


@pytest.fixture
def make_runner():
    """Factory for runners with memory sampling off."""
    def _make(**kwargs):
        kwargs.setdefault("track_memory", False)
        config = BenchmarkConfig(**kwargs)
        return BenchmarkRunner(config=config, memory_probe=MemoryProbe(enabled=False))
    return _make


@pytest.fixture
def write_module(tmp_path):
    """Write a benchmark module file into tmp_path and return its path."""
    def _write(name, body):
        path = tmp_path / f"{name}.py"
        path.write_text(textwrap.dedent(body))
        return path
    return _write


@pytest.fixture
def valid_module_source():
    return """
        def init():
            return {"iterations": 3, "size": 10}

        def get_iterations(config):
            return config.require("iterations")

        def setup(config):
            return list(range(config["size"]))

        def run(config, fixture):
            return "sum()" if sum(fixture) >= 0 else None
    """
