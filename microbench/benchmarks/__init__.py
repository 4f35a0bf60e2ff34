"""
Bundled benchmark modules.

Each submodule implements the module contract (init, get_iterations,
optional setup, run) and is loaded by the harness like any user module.
"""

from . import fibonacci
from . import factorial
from . import smoothing
from . import bubble_sort

__all__ = [
    "fibonacci",
    "factorial",
    "smoothing",
    "bubble_sort",
]
