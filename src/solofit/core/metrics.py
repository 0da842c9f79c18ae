"""
Metrics derived from session history.

Pure functions over CompletedSessionRecord lists: streaks, training time,
per-day activity, points badges and clock formatting.  "Latest" queries sort
by timestamp explicitly; history order is insertion order, not chronology.
"""

from datetime import date, datetime, timedelta

from .config import POINT_BADGES, points_for
from .models import CompletedSessionRecord, Workout, local_date


def format_clock(seconds: int) -> str:
    """Format seconds as ``m:ss`` (e.g. 75 -> "1:15")."""
    seconds = max(0, seconds)
    return f"{seconds // 60}:{seconds % 60:02d}"


def completed_only(history: list[CompletedSessionRecord]) -> list[CompletedSessionRecord]:
    """Records of fully completed sessions, insertion order preserved."""
    return [r for r in history if r.completed]


def training_days(history: list[CompletedSessionRecord]) -> list[date]:
    """Distinct local calendar days with at least one completed session, ascending."""
    return sorted({r.local_day for r in completed_only(history)})


def longest_streak(history: list[CompletedSessionRecord]) -> int:
    """
    Longest run of consecutive calendar days with a completed session.

    Args:
        history: Session history (stopped sessions are ignored)

    Returns:
        Longest streak in days (0 with no completed sessions)
    """
    days = training_days(history)
    if not days:
        return 0

    best = current = 1
    for prev, day in zip(days, days[1:]):
        if day - prev == timedelta(days=1):
            current += 1
            best = max(best, current)
        else:
            current = 1
    return best


def current_streak(history: list[CompletedSessionRecord], today: date | None = None) -> int:
    """
    Streak ending today (or yesterday, so an unfinished day does not break it).

    Args:
        history: Session history
        today: Reference date (default: local today)

    Returns:
        Current streak in days
    """
    days = set(training_days(history))
    if not days:
        return 0
    if today is None:
        today = datetime.now().date()

    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def latest_session(history: list[CompletedSessionRecord]) -> CompletedSessionRecord | None:
    """Most recent session by start time, regardless of insertion order."""
    if not history:
        return None
    return max(history, key=lambda r: r.started_at)


def sessions_newest_first(history: list[CompletedSessionRecord]) -> list[CompletedSessionRecord]:
    return sorted(history, key=lambda r: r.started_at, reverse=True)


def total_training_seconds(history: list[CompletedSessionRecord]) -> int:
    """Sum of actual elapsed seconds over every archived session."""
    return sum(r.duration for r in history)


def format_total_time(total_seconds: int) -> str:
    """Format a duration as ``"1h 5m"`` or ``"45m"`` (whole minutes)."""
    minutes = total_seconds // 60
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes}m"


def daily_minutes(history: list[CompletedSessionRecord]) -> list[tuple[date, int]]:
    """
    Whole minutes trained per local calendar day, ascending by date.

    Seconds are summed per day before converting, so several short
    sessions on one day still add up.
    """
    per_day: dict[date, int] = {}
    for r in history:
        per_day[r.local_day] = per_day.get(r.local_day, 0) + r.duration
    return [(day, seconds // 60) for day, seconds in sorted(per_day.items())]


def session_points(workout: Workout) -> int:
    """Points a workout is worth when completed."""
    return points_for(
        len(workout.exercises),
        workout.total_duration,
        challenge=workout.mode == "challenge",
    )


def next_points_badge(total_points: int) -> tuple[int, int] | None:
    """
    The next points badge still ahead of ``total_points``.

    Returns:
        (badge threshold, points still needed) or None once all are reached
    """
    for badge in POINT_BADGES:
        if badge > total_points:
            return badge, badge - total_points
    return None
