"""
Data models for solofit.

Immutable value records (Exercise, Workout, CompletedSessionRecord,
Achievement) plus the one mutable aggregate, UserProgress.  The runtime
Session record lives beside the engine in session.py.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import ClassVar, Literal

from .config import (
    ALLOWED_DURATIONS,
    DEFAULT_DIFFICULTY,
    DEFAULT_DURATION_MINUTES,
    DIFFICULTY_MULTIPLIERS,
    DIFFICULTY_RANK,
)

Category = Literal["warmup", "chest_arms", "legs", "hiit", "stretching", "yoga"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
WorkoutMode = Literal["normal", "challenge"]
AchievementType = Literal[
    "first_workout",
    "streak_3",
    "streak_7",
    "all_categories",
    "monday_warrior",
    "challenge_accepted",
    "points_100",
    "points_500",
    "points_1000",
]

CATEGORIES: tuple[Category, ...] = (
    "warmup",
    "chest_arms",
    "legs",
    "hiit",
    "stretching",
    "yoga",
)

CATEGORY_NAMES: dict[str, str] = {
    "warmup": "Warm-up",
    "chest_arms": "Chest & Arms",
    "legs": "Legs",
    "hiit": "HIIT",
    "stretching": "Stretching",
    "yoga": "Bedtime Yoga",
}

DIFFICULTIES: tuple[Difficulty, ...] = ("beginner", "intermediate", "advanced")
WORKOUT_MODES: tuple[WorkoutMode, ...] = ("normal", "challenge")

# Table order; evaluation results follow it.
ACHIEVEMENT_TYPES: tuple[AchievementType, ...] = (
    "first_workout",
    "streak_3",
    "streak_7",
    "all_categories",
    "monday_warrior",
    "challenge_accepted",
    "points_100",
    "points_500",
    "points_1000",
)


def tier_allows(difficulty: str, base_level: str) -> bool:
    """True if an exercise of tier ``base_level`` is eligible at ``difficulty``."""
    return DIFFICULTY_RANK[base_level] <= DIFFICULTY_RANK[difficulty]


def local_date(moment: datetime) -> date:
    """Calendar date of a timestamp in local time (naive values are already local)."""
    if moment.tzinfo is not None:
        moment = moment.astimezone()
    return moment.date()


def _check_choice(value: str, choices: tuple[str, ...], name: str) -> None:
    if value not in choices:
        raise ValueError(f"Invalid {name}: {value!r}. Must be one of {choices}")


@dataclass(frozen=True)
class Exercise:
    """
    A single catalog exercise.

    ``base_level`` is the minimum tier that may perform it; ``difficulty`` is
    the tier it is currently bound to, which scales the duration.
    """

    name: str
    description: str
    duration: int  # base duration in seconds
    category: Category
    base_level: Difficulty
    tips: tuple[str, ...] = ()
    voice_instruction: str = ""
    animation_name: str = ""
    difficulty: Difficulty = DEFAULT_DIFFICULTY  # type: ignore[assignment]

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.name.strip():
            raise ValueError("Exercise name must be non-empty")
        if self.duration < 0:
            raise ValueError("duration must be non-negative")
        _check_choice(self.category, CATEGORIES, "category")
        _check_choice(self.base_level, DIFFICULTIES, "base_level")
        _check_choice(self.difficulty, DIFFICULTIES, "difficulty")

    @property
    def adjusted_duration(self) -> int:
        """Base duration scaled by the difficulty multiplier, rounded half-up."""
        return int(math.floor(self.duration * DIFFICULTY_MULTIPLIERS[self.difficulty] + 0.5))

    def with_difficulty(self, difficulty: Difficulty) -> "Exercise":
        """Return a copy bound to ``difficulty``; the catalog entry is untouched."""
        return replace(self, difficulty=difficulty)


@dataclass(frozen=True)
class Workout:
    """
    An ordered selection of exercises produced by the composer.

    An empty ``exercises`` tuple is a degenerate workout that cannot be started.
    """

    category: Category
    difficulty: Difficulty
    mode: WorkoutMode
    exercises: tuple[Exercise, ...]
    total_duration: int

    def __post_init__(self) -> None:
        """Validate workout data."""
        _check_choice(self.category, CATEGORIES, "category")
        _check_choice(self.difficulty, DIFFICULTIES, "difficulty")
        _check_choice(self.mode, WORKOUT_MODES, "mode")
        if self.total_duration < 0:
            raise ValueError("total_duration must be non-negative")

    @property
    def name(self) -> str:
        return CATEGORY_NAMES[self.category]

    @property
    def is_empty(self) -> bool:
        return not self.exercises


@dataclass(frozen=True)
class CompletedSessionRecord:
    """
    Archived outcome of one session, appended to history on stop or completion.

    ``ended_at`` is only set for fully completed sessions.
    """

    workout: Workout
    started_at: datetime
    ended_at: datetime | None
    completed: bool
    duration: int  # seconds actually elapsed

    def __post_init__(self) -> None:
        """Validate record data."""
        if self.duration < 0:
            raise ValueError("duration must be non-negative")

    @property
    def local_day(self) -> date:
        return local_date(self.started_at)


@dataclass(frozen=True)
class Achievement:
    """An earned achievement."""

    type: AchievementType
    earned_at: datetime

    def __post_init__(self) -> None:
        _check_choice(self.type, ACHIEVEMENT_TYPES, "achievement type")


@dataclass
class UserProgress:
    """
    Preferences, accumulated points, session history and earned achievements.

    ``total_points`` never decreases and the achievement set only grows;
    history is append-only apart from ``reset_history``.
    """

    difficulty: Difficulty = DEFAULT_DIFFICULTY  # type: ignore[assignment]
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    sound_enabled: bool = True
    vibration_enabled: bool = True
    voice_prompts_enabled: bool = False
    total_points: int = 0
    history: list[CompletedSessionRecord] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)

    ALLOWED_DURATIONS: ClassVar[tuple[int, ...]] = ALLOWED_DURATIONS

    def __post_init__(self) -> None:
        """Validate progress data."""
        _check_choice(self.difficulty, DIFFICULTIES, "difficulty")
        if self.duration_minutes not in self.ALLOWED_DURATIONS:
            raise ValueError(
                f"duration_minutes must be one of {self.ALLOWED_DURATIONS}, "
                f"got {self.duration_minutes}"
            )
        if self.total_points < 0:
            raise ValueError("total_points must be non-negative")

    @property
    def earned_types(self) -> set[str]:
        return {a.type for a in self.achievements}

    @property
    def completed_sessions(self) -> list[CompletedSessionRecord]:
        return [r for r in self.history if r.completed]

    def add_points(self, delta: int) -> int:
        """Add a non-negative delta and return the new total."""
        if delta < 0:
            raise ValueError(f"points delta must be non-negative, got {delta}")
        self.total_points += delta
        return self.total_points

    def add_achievement(self, achievement: Achievement) -> bool:
        """Record an achievement unless its type is already earned."""
        if achievement.type in self.earned_types:
            return False
        self.achievements.append(achievement)
        return True

    def append_record(self, record: CompletedSessionRecord) -> None:
        self.history.append(record)

    def reset_history(self) -> None:
        """Bulk reset: drop every history record (points and achievements stay)."""
        self.history.clear()
