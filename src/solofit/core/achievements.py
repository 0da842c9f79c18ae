"""
Achievement evaluation: points for a completed session plus unlocks.

Rules are an ordered table of (type, predicate) pairs evaluated uniformly
against one EvaluationContext.  Adding an achievement means adding a row
here and a type in models.ACHIEVEMENT_TYPES.

Only fully completed sessions are evaluated; stopped sessions earn nothing.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

from .config import POINT_BADGES, STREAK_LONG_DAYS, STREAK_SHORT_DAYS
from .metrics import completed_only, longest_streak, session_points
from .models import (
    CATEGORIES,
    Achievement,
    AchievementType,
    CompletedSessionRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AchievementInfo:
    """Display metadata for one achievement type."""

    title: str
    description: str


ACHIEVEMENT_INFO: dict[str, AchievementInfo] = {
    "first_workout": AchievementInfo("First Workout", "Complete your first workout."),
    "streak_3": AchievementInfo("3-Day Streak", "Train 3 days in a row."),
    "streak_7": AchievementInfo("7-Day Streak", "Train 7 days in a row."),
    "all_categories": AchievementInfo("All Categories", "Complete a workout in every category."),
    "monday_warrior": AchievementInfo("Monday Warrior", "Train on a Monday."),
    "challenge_accepted": AchievementInfo("Challenge Accepted", "Finish a Challenge mode workout."),
    "points_100": AchievementInfo("100 Points", "Earn 100 total points."),
    "points_500": AchievementInfo("500 Points", "Earn 500 total points."),
    "points_1000": AchievementInfo("1000 Points", "Earn 1000 total points."),
}


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a rule may look at; built once per evaluation."""

    completed: list[CompletedSessionRecord]  # includes just_finished
    just_finished: CompletedSessionRecord
    total_points: int  # after adding this session's points
    longest_streak: int


@dataclass
class Evaluation:
    """Result of evaluating one completed session."""

    newly_earned: list[Achievement] = field(default_factory=list)
    points_delta: int = 0
    total_points: int = 0

    @property
    def types(self) -> list[str]:
        return [a.type for a in self.newly_earned]


Rule = tuple[AchievementType, Callable[[EvaluationContext], bool]]

ACHIEVEMENT_RULES: tuple[Rule, ...] = (
    ("first_workout", lambda ctx: len(ctx.completed) == 1),
    ("streak_3", lambda ctx: ctx.longest_streak >= STREAK_SHORT_DAYS),
    ("streak_7", lambda ctx: ctx.longest_streak >= STREAK_LONG_DAYS),
    (
        "all_categories",
        lambda ctx: {r.workout.category for r in ctx.completed} >= set(CATEGORIES),
    ),
    ("monday_warrior", lambda ctx: ctx.just_finished.local_day.weekday() == 0),
    ("challenge_accepted", lambda ctx: ctx.just_finished.workout.mode == "challenge"),
    ("points_100", lambda ctx: ctx.total_points >= POINT_BADGES[0]),
    ("points_500", lambda ctx: ctx.total_points >= POINT_BADGES[1]),
    ("points_1000", lambda ctx: ctx.total_points >= POINT_BADGES[2]),
)


def build_context(
    history: list[CompletedSessionRecord],
    just_finished: CompletedSessionRecord,
    total_points: int,
) -> EvaluationContext:
    """
    Assemble the rule context.

    ``just_finished`` is counted once even if the caller has not appended it
    to ``history`` yet.
    """
    records = list(history)
    if just_finished not in records:
        records.append(just_finished)
    completed = completed_only(records)
    return EvaluationContext(
        completed=completed,
        just_finished=just_finished,
        total_points=total_points,
        longest_streak=longest_streak(completed),
    )


def evaluate(
    history: list[CompletedSessionRecord],
    just_finished: CompletedSessionRecord,
    already_earned: Iterable[str],
    total_points: int = 0,
    now: datetime | None = None,
) -> Evaluation:
    """
    Score a completed session and find achievements it unlocks.

    Args:
        history: Session history, normally already including ``just_finished``
        just_finished: The session that was just completed
        already_earned: Achievement types the user already holds
        total_points: Points held before this session
        now: Timestamp for new achievements (default: ``datetime.now()``)

    Returns:
        Evaluation with newly earned achievements (table order, no duplicates),
        the points delta and the updated total

    Raises:
        ValueError: If ``just_finished`` is not a completed session
    """
    if not just_finished.completed:
        raise ValueError("Only completed sessions are evaluated")
    if now is None:
        now = datetime.now()

    delta = session_points(just_finished.workout)
    updated_total = total_points + delta
    ctx = build_context(history, just_finished, updated_total)

    earned = set(already_earned)
    newly: list[Achievement] = []
    for achievement_type, predicate in ACHIEVEMENT_RULES:
        if achievement_type in earned:
            continue
        if predicate(ctx):
            newly.append(Achievement(type=achievement_type, earned_at=now))
            earned.add(achievement_type)

    if newly:
        logger.info("Unlocked: %s", ", ".join(a.type for a in newly))

    return Evaluation(newly_earned=newly, points_delta=delta, total_points=updated_total)
