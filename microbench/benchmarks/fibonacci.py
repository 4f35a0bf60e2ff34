"""
Fibonacci benchmark - iterative computation of a large Fibonacci number.
"""


def fib(n: int) -> int:
    """Return the n-th Fibonacci number, computed iteratively."""
    current, last, penult = 0, 0, 1
    for _ in range(n):
        current = last + penult
        penult = last
        last = current
    return current


def init() -> dict:
    return {"iterations": 50, "max_fib": 1000}


def get_iterations(config) -> int:
    return config.require("iterations")


def run(config, fixture) -> str:
    fib(config.require("max_fib"))
    return "fib()"
