"""
Image smoothing benchmark - naive box-filter convolution.

Builds a synthetic grayscale image once and blurs it with a square kernel
using plain nested loops. Edge pixels average over the part of the kernel
that falls inside the image.
"""

import random

Image = list[list[float]]


def synthetic_image(width: int, height: int, seed: int) -> Image:
    """Random noise over a horizontal gradient."""
    rng = random.Random(seed)
    return [
        [(x / max(width - 1, 1)) * 0.5 + rng.random() * 0.5 for x in range(width)]
        for _ in range(height)
    ]


def smooth(image: Image, radius: int) -> Image:
    """Box-blur ``image`` with a (2 * radius + 1)^2 kernel."""
    height = len(image)
    width = len(image[0]) if height else 0
    out = [[0.0] * width for _ in range(height)]

    for y in range(height):
        y0, y1 = max(0, y - radius), min(height - 1, y + radius)
        for x in range(width):
            x0, x1 = max(0, x - radius), min(width - 1, x + radius)
            total = 0.0
            for yy in range(y0, y1 + 1):
                row = image[yy]
                for xx in range(x0, x1 + 1):
                    total += row[xx]
            out[y][x] = total / ((y1 - y0 + 1) * (x1 - x0 + 1))

    return out


def init() -> dict:
    return {
        "iterations": 20,
        "width": 64,
        "height": 64,
        "radius": 1,
        "seed": 7,
    }


def get_iterations(config) -> int:
    return config.require("iterations")


def setup(config) -> Image:
    return synthetic_image(
        config.require("width"),
        config.require("height"),
        config.get("seed", 7),
    )


def run(config, fixture: Image) -> str:
    smooth(fixture, config.require("radius"))
    return "smooth()"
