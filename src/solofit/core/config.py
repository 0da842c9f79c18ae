"""
Configuration constants for the workout model.

All adjustable parameters are centralized here for easy tuning.
"""

import os
from pathlib import Path
from typing import Final

# =============================================================================
# DIFFICULTY / SKILL TIERS
# =============================================================================

DIFFICULTY_MULTIPLIERS: Final[dict[str, float]] = {
    "beginner": 0.8,
    "intermediate": 1.0,
    "advanced": 1.3,
}

# Tier rank: a difficulty admits every exercise whose tier rank is <= its own.
DIFFICULTY_RANK: Final[dict[str, int]] = {
    "beginner": 0,
    "intermediate": 1,
    "advanced": 2,
}

DEFAULT_DIFFICULTY: Final[str] = "intermediate"

# =============================================================================
# WORKOUT DURATION PREFERENCES (minutes)
# =============================================================================

ALLOWED_DURATIONS: Final[tuple[int, ...]] = (10, 15, 30)
DEFAULT_DURATION_MINUTES: Final[int] = 15

# =============================================================================
# POINTS
# =============================================================================

POINTS_PER_EXERCISE: Final[int] = 10
POINTS_PER_MINUTE: Final[int] = 5
CHALLENGE_BONUS_POINTS: Final[int] = 20

# =============================================================================
# ACHIEVEMENT THRESHOLDS
# =============================================================================

STREAK_SHORT_DAYS: Final[int] = 3
STREAK_LONG_DAYS: Final[int] = 7
POINT_BADGES: Final[tuple[int, ...]] = (100, 500, 1000)

# =============================================================================
# SESSION TIMER
# =============================================================================

TICK_SECONDS: Final[float] = 1.0
COUNTDOWN_WINDOW_SECONDS: Final[int] = 3  # last seconds of an exercise flagged for a cue

# =============================================================================
# STORAGE LOCATIONS
# =============================================================================

DATA_DIR_ENV: Final[str] = "SOLOFIT_HOME"
DATA_DIR_NAME: Final[str] = ".solofit"
PROFILE_FILENAME: Final[str] = "profile.json"
HISTORY_FILENAME: Final[str] = "history.jsonl"
USER_EXERCISES_DIRNAME: Final[str] = "exercises"


def get_default_data_dir() -> Path:
    """
    Return the directory holding profile and history files.

    ``$SOLOFIT_HOME`` wins when set; otherwise ``~/.solofit``.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / DATA_DIR_NAME


def points_for(exercise_count: int, total_duration: int, challenge: bool) -> int:
    """
    Points awarded for one completed workout.

        points = n * 10 + max(1, total_duration // 60) * 5 + (20 if challenge)

    Args:
        exercise_count: Number of exercises in the workout
        total_duration: Workout total duration in seconds
        challenge: Whether the workout ran in challenge mode

    Returns:
        Points for the workout
    """
    minutes = max(1, total_duration // 60)
    bonus = CHALLENGE_BONUS_POINTS if challenge else 0
    return exercise_count * POINTS_PER_EXERCISE + minutes * POINTS_PER_MINUTE + bonus
