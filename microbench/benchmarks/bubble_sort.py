"""
Bubble sort benchmark - exchange sort over a random array.

The array is sorted in place, so unless the harness rebuilds the fixture
before each iteration every iteration after the first sorts an already
sorted array.
"""

import random


def sort(array: list) -> None:
    """Exchange sort, in place."""
    n = len(array)
    for i in range(n - 1):
        for j in range(i, n):
            if array[i] > array[j]:
                array[i], array[j] = array[j], array[i]


def create(num_elements: int, seed: int) -> list[float]:
    rng = random.Random(seed)
    return [rng.random() for _ in range(num_elements)]


def init() -> dict:
    return {"iterations": 30, "num_elements": 500, "seed": 1}


def get_iterations(config) -> int:
    return config.require("iterations")


def setup(config) -> list[float]:
    return create(config.require("num_elements"), config.get("seed", 1))


def run(config, fixture: list[float]) -> str:
    sort(fixture)
    return "sort()"
