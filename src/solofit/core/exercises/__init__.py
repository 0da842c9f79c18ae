"""
Exercise catalog for solofit.

The catalog is a static table of exercises grouped by category, each tagged
with the minimum skill tier allowed to perform it.
"""

from .registry import EXERCISE_REGISTRY, CatalogProvider, ExerciseCatalog, get_catalog

__all__ = [
    "CatalogProvider",
    "EXERCISE_REGISTRY",
    "ExerciseCatalog",
    "get_catalog",
]
