"""
Factorial benchmark - big-integer multiplication in a tight loop.
"""


def factorial(n: int) -> int:
    total = 1
    for i in range(1, n + 1):
        total = total * i
    return total


def init() -> dict:
    return {"iterations": 50, "max_fact": 1000}


def get_iterations(config) -> int:
    return config.require("iterations")


def setup(config) -> None:
    pass


def run(config, fixture) -> str:
    factorial(config.require("max_fact"))
    return "factorial()"
