"""
Bundled suite definitions for micro-benchmarking.
"""

from .definitions import (
    BundledModule,
    BUNDLED_MODULES,
    CATEGORIES,
    get_bundled_module,
    get_modules_by_category,
    bundled_sources,
)

__all__ = [
    "BundledModule",
    "BUNDLED_MODULES",
    "CATEGORIES",
    "get_bundled_module",
    "get_modules_by_category",
    "bundled_sources",
]
