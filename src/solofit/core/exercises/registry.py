"""
Exercise catalog registry.

The catalog is loaded from the per-category YAML files in the bundled
``src/solofit/exercises/`` directory at import time.  If nothing can be
loaded a RuntimeError is raised: the application cannot start without a
catalog.

ExerciseCatalog is the default catalog provider handed to the composer.
"""

from typing import Protocol, Sequence

from ..models import CATEGORIES, Category, Difficulty, Exercise, tier_allows


class CatalogProvider(Protocol):
    """Source of ordered, tier-filtered exercises for one category."""

    def get_exercises(self, category: Category, difficulty: Difficulty) -> Sequence[Exercise]:
        ...


def _build_registry() -> dict[str, tuple[Exercise, ...]]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "solofit: no exercise catalog could be loaded from YAML. "
            "Check that src/solofit/exercises/*.yaml files are present and valid."
        )
    return {category: tuple(exercises) for category, exercises in loaded.items()}


EXERCISE_REGISTRY: dict[str, tuple[Exercise, ...]] = _build_registry()


class ExerciseCatalog:
    """
    Read-only catalog backed by a ``{category: exercises}`` table.

    Args:
        table: Category table (default: the bundled registry)
    """

    def __init__(self, table: dict[str, tuple[Exercise, ...]] | None = None):
        self._table = EXERCISE_REGISTRY if table is None else table

    def categories(self) -> list[str]:
        """Categories present in the catalog, in enumeration order."""
        return [c for c in CATEGORIES if c in self._table]

    def exercises_for(self, category: str) -> tuple[Exercise, ...]:
        """
        Unfiltered catalog slice for a category, in catalog order.

        Raises:
            ValueError: If the category is unknown
        """
        if category not in CATEGORIES:
            valid = ", ".join(CATEGORIES)
            raise ValueError(f"Unknown category '{category}'. Valid categories: {valid}")
        return self._table.get(category, ())

    def get_exercises(self, category: Category, difficulty: Difficulty) -> list[Exercise]:
        """Exercises eligible at ``difficulty``, bound to it, in catalog order."""
        return [
            ex.with_difficulty(difficulty)
            for ex in self.exercises_for(category)
            if tier_allows(difficulty, ex.base_level)
        ]


def get_catalog() -> ExerciseCatalog:
    """Return a catalog over the bundled registry."""
    return ExerciseCatalog()
