"""
Tests for points and achievement evaluation.

Calendar reference: 2026-03-02 is a Monday, 2026-03-03 a Tuesday.
"""

from datetime import datetime, timedelta

import pytest

from solofit.core.achievements import ACHIEVEMENT_INFO, ACHIEVEMENT_RULES, evaluate
from solofit.core.models import ACHIEVEMENT_TYPES, CATEGORIES, CompletedSessionRecord, Exercise, Workout


TUESDAY = datetime(2026, 3, 3, 18, 0, 0)
MONDAY = datetime(2026, 3, 2, 18, 0, 0)


def _workout(
    category: str = "hiit",
    count: int = 5,
    seconds_each: int = 120,
    mode: str = "normal",
) -> Workout:
    exercises = tuple(
        Exercise(
            name=f"Ex{i}",
            description="",
            duration=seconds_each,
            category=category,  # type: ignore[arg-type]
            base_level="beginner",
        )
        for i in range(count)
    )
    return Workout(
        category=category,  # type: ignore[arg-type]
        difficulty="intermediate",
        mode=mode,  # type: ignore[arg-type]
        exercises=exercises,
        total_duration=count * seconds_each,
    )


def _record(
    started_at: datetime,
    completed: bool = True,
    workout: Workout | None = None,
) -> CompletedSessionRecord:
    workout = workout or _workout()
    return CompletedSessionRecord(
        workout=workout,
        started_at=started_at,
        ended_at=started_at + timedelta(seconds=workout.total_duration) if completed else None,
        completed=completed,
        duration=workout.total_duration if completed else 30,
    )


def _run_days(days: list[datetime], workout: Workout | None = None) -> list[list[str]]:
    """Complete one session per timestamp, feeding state forward like the tracker does."""
    history: list[CompletedSessionRecord] = []
    earned: set[str] = set()
    points = 0
    unlocked_per_day = []
    for moment in days:
        record = _record(moment, workout=workout)
        history.append(record)
        result = evaluate(history, record, earned, total_points=points, now=moment)
        points = result.total_points
        earned.update(result.types)
        unlocked_per_day.append(result.types)
    return unlocked_per_day


class TestPoints:
    def test_ten_minute_five_exercise_workout(self):
        """5 x 10 + max(1, 600 // 60) x 5 + 0 = 100, which also reaches the first badge."""
        record = _record(TUESDAY)

        result = evaluate([record], record, set(), total_points=0, now=TUESDAY)

        assert result.points_delta == 100
        assert result.total_points == 100
        assert result.types == ["first_workout", "points_100"]
        assert all(a.earned_at == TUESDAY for a in result.newly_earned)

    def test_short_workout_counts_at_least_one_minute(self):
        # 2 x 10 + max(1, 40 // 60) x 5
        record = _record(TUESDAY, workout=_workout(count=2, seconds_each=20))
        result = evaluate([record], record, set(), now=TUESDAY)
        assert result.points_delta == 25

    def test_challenge_bonus(self):
        # 5 x 10 + 10 x 5 + 20
        record = _record(TUESDAY, workout=_workout(mode="challenge"))
        result = evaluate([record], record, set(), now=TUESDAY)
        assert result.points_delta == 120
        assert "challenge_accepted" in result.types

    def test_crossing_two_badges_at_once(self):
        record = _record(TUESDAY)
        result = evaluate(
            [record], record, {"first_workout"}, total_points=450, now=TUESDAY
        )
        assert result.total_points == 550
        assert result.types == ["points_100", "points_500"]

    def test_stopped_session_is_not_evaluated(self):
        record = _record(TUESDAY, completed=False)
        with pytest.raises(ValueError, match="completed"):
            evaluate([record], record, set())


class TestFirstWorkout:
    def test_first_completed_session(self):
        record = _record(TUESDAY)
        assert "first_workout" in evaluate([record], record, set(), now=TUESDAY).types

    def test_counts_just_finished_when_not_yet_in_history(self):
        record = _record(TUESDAY)
        assert "first_workout" in evaluate([], record, set(), now=TUESDAY).types

    def test_stopped_sessions_do_not_count(self):
        stopped = _record(TUESDAY - timedelta(days=1), completed=False)
        record = _record(TUESDAY)
        result = evaluate([stopped, record], record, set(), now=TUESDAY)
        assert "first_workout" in result.types

    def test_not_awarded_for_second_workout(self):
        earlier = _record(TUESDAY - timedelta(days=3))
        record = _record(TUESDAY)
        result = evaluate([earlier, record], record, set(), now=TUESDAY)
        assert "first_workout" not in result.types


class TestStreaks:
    def test_five_consecutive_days(self):
        days = [TUESDAY + timedelta(days=i) for i in range(5)]
        unlocked = _run_days(days)

        assert "streak_3" in unlocked[2]
        flat = [t for day in unlocked for t in day]
        assert "streak_3" in flat
        assert "streak_7" not in flat

    def test_seven_consecutive_days(self):
        days = [TUESDAY + timedelta(days=i) for i in range(7)]
        unlocked = _run_days(days)

        assert "streak_7" in unlocked[6]
        assert all("streak_7" not in day for day in unlocked[:6])

    def test_gap_breaks_streak(self):
        days = [TUESDAY, TUESDAY + timedelta(days=1), TUESDAY + timedelta(days=3)]
        flat = [t for day in _run_days(days) for t in day]
        assert "streak_3" not in flat

    def test_two_sessions_same_day_count_once(self):
        days = [TUESDAY, TUESDAY + timedelta(hours=2), TUESDAY + timedelta(days=1)]
        flat = [t for day in _run_days(days) for t in day]
        assert "streak_3" not in flat

    def test_stopped_day_does_not_bridge_gap(self):
        history = [
            _record(TUESDAY),
            _record(TUESDAY + timedelta(days=1)),
            _record(TUESDAY + timedelta(days=2), completed=False),
        ]
        record = _record(TUESDAY + timedelta(days=3))
        history.append(record)
        result = evaluate(history, record, {"first_workout"}, now=record.started_at)
        assert "streak_3" not in result.types


class TestOtherAchievements:
    def test_all_categories(self):
        history: list[CompletedSessionRecord] = []
        earned: set[str] = set()
        last = None
        for i, category in enumerate(CATEGORIES):
            record = _record(TUESDAY + timedelta(days=2 * i), workout=_workout(category))
            history.append(record)
            last = evaluate(history, record, earned, now=record.started_at)
            earned.update(last.types)
            if i < len(CATEGORIES) - 1:
                assert "all_categories" not in last.types
        assert "all_categories" in last.types

    def test_monday_warrior(self):
        record = _record(MONDAY)
        assert "monday_warrior" in evaluate([record], record, set(), now=MONDAY).types

    def test_not_monday(self):
        record = _record(TUESDAY)
        assert "monday_warrior" not in evaluate([record], record, set(), now=TUESDAY).types

    def test_already_earned_never_repeats(self):
        record = _record(MONDAY, workout=_workout(mode="challenge"))
        earned = {"first_workout", "monday_warrior", "challenge_accepted", "points_100"}
        result = evaluate([record], record, earned, total_points=0, now=MONDAY)
        assert result.types == []
        assert result.points_delta == 120


class TestRuleTable:
    def test_rules_follow_type_order(self):
        assert tuple(t for t, _ in ACHIEVEMENT_RULES) == ACHIEVEMENT_TYPES

    def test_every_type_has_display_info(self):
        assert set(ACHIEVEMENT_INFO) == set(ACHIEVEMENT_TYPES)

    def test_results_come_in_table_order(self):
        record = _record(MONDAY, workout=_workout(mode="challenge"))
        result = evaluate([record], record, set(), now=MONDAY)
        assert result.types == [
            "first_workout",
            "monday_warrior",
            "challenge_accepted",
            "points_100",
        ]
