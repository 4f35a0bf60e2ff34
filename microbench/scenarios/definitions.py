"""
Bundled suite definitions.

Groups the bundled benchmark modules into categories so the CLI can run
all of them or just one family.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BundledModule:
    """A bundled benchmark module and the family it belongs to."""

    name: str
    category: str
    module_path: str
    description: str = ""


BUNDLED_MODULES = [
    BundledModule(
        name="fibonacci",
        category="numeric",
        module_path="microbench.benchmarks.fibonacci",
        description="Iterative fib(n) with big integers",
    ),
    BundledModule(
        name="factorial",
        category="numeric",
        module_path="microbench.benchmarks.factorial",
        description="Iterative n! with big integers",
    ),
    BundledModule(
        name="smoothing",
        category="image",
        module_path="microbench.benchmarks.smoothing",
        description="Naive box-filter convolution over a synthetic image",
    ),
    BundledModule(
        name="bubble_sort",
        category="sorting",
        module_path="microbench.benchmarks.bubble_sort",
        description="In-place exchange sort of a random array",
    ),
]

CATEGORIES = sorted({m.category for m in BUNDLED_MODULES})


def get_bundled_module(name: str) -> BundledModule:
    """Get a bundled module by name."""
    for module in BUNDLED_MODULES:
        if module.name == name:
            return module
    raise ValueError(f"Unknown bundled module: {name}")


def get_modules_by_category(category: str) -> list[BundledModule]:
    """Get all bundled modules in a category."""
    if category not in CATEGORIES:
        raise ValueError(f"Unknown category: {category} (expected one of {', '.join(CATEGORIES)})")
    return [m for m in BUNDLED_MODULES if m.category == category]


def bundled_sources(category: str = "all") -> list[str]:
    """Dotted module paths for ``category``, in bundled order."""
    if category == "all":
        return [m.module_path for m in BUNDLED_MODULES]
    return [m.module_path for m in get_modules_by_category(category)]
