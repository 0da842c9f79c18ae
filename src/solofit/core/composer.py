"""
Workout composition: pick an ordered subset of catalog exercises.

Selection is greedy over the fixed catalog order, with no reordering and no
randomness: the same catalog, category and difficulty always yield the same
workout.
"""

import logging

from .exercises.registry import CatalogProvider, get_catalog
from .models import Category, Difficulty, Exercise, UserProgress, Workout, WorkoutMode, tier_allows

logger = logging.getLogger(__name__)


def select_exercises(
    candidates: list[Exercise],
    budget_seconds: int,
    mode: WorkoutMode,
) -> tuple[list[Exercise], int]:
    """
    Greedy selection under a duration budget.

    In normal mode an exercise is accepted only while the running total stays
    within the budget; selection ends at the first exercise that does not fit
    or once the total reaches the budget.  Challenge mode takes everything.

    Args:
        candidates: Tier-filtered exercises in catalog order
        budget_seconds: Target duration in seconds
        mode: "normal" or "challenge"

    Returns:
        (selected exercises, total adjusted duration)
    """
    selected: list[Exercise] = []
    total = 0

    for ex in candidates:
        duration = ex.adjusted_duration
        if mode == "challenge":
            selected.append(ex)
            total += duration
            continue
        if total + duration > budget_seconds:
            break
        selected.append(ex)
        total += duration
        if total >= budget_seconds:
            break

    return selected, total


def compose(
    category: Category,
    difficulty: Difficulty,
    target_minutes: int,
    mode: WorkoutMode = "normal",
    catalog: CatalogProvider | None = None,
) -> Workout:
    """
    Build a workout for a category at a difficulty under a time budget.

    Never raises for an unfillable budget: a workout with no exercises is the
    signal, and the session engine refuses to start it.

    Args:
        category: Workout category
        difficulty: Requested skill tier
        target_minutes: Duration budget in minutes (ignored in challenge mode)
        mode: "normal" or "challenge"
        catalog: Catalog provider (default: bundled catalog)

    Returns:
        Composed Workout
    """
    if catalog is None:
        catalog = get_catalog()

    candidates = [
        ex.with_difficulty(difficulty)
        for ex in catalog.get_exercises(category, difficulty)
        if tier_allows(difficulty, ex.base_level)
    ]
    selected, total = select_exercises(candidates, target_minutes * 60, mode)

    if not selected:
        logger.warning(
            "Composed an empty %s workout (%s, %d min, %s)",
            category, difficulty, target_minutes, mode,
        )
    else:
        logger.debug(
            "Composed %s workout: %d exercises, %ds", category, len(selected), total
        )

    return Workout(
        category=category,
        difficulty=difficulty,
        mode=mode,
        exercises=tuple(selected),
        total_duration=total,
    )


def compose_for(
    progress: UserProgress,
    category: Category,
    mode: WorkoutMode = "normal",
    catalog: CatalogProvider | None = None,
) -> Workout:
    """Compose using the user's stored difficulty and duration preferences."""
    return compose(
        category,
        progress.difficulty,
        progress.duration_minutes,
        mode=mode,
        catalog=catalog,
    )
