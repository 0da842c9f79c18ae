"""
JSON serialization for solofit data models.

Handles conversion between dataclasses and JSON-compatible dicts.
Timestamps are stored as ISO-8601 strings.
"""

import json
from datetime import datetime
from typing import Any

from ..core.models import (
    ACHIEVEMENT_TYPES,
    CATEGORIES,
    DIFFICULTIES,
    WORKOUT_MODES,
    Achievement,
    CompletedSessionRecord,
    Exercise,
    UserProgress,
    Workout,
)


class ValidationError(Exception):
    """Raised when persisted data fails validation."""

    pass


def validate_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Validate that a value is one of a fixed set of strings.

    Raises:
        ValidationError: If the value is not a valid choice
    """
    if value not in choices:
        raise ValidationError(f"Invalid {name}: {value!r}. Must be one of {choices}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def parse_timestamp(value: str, name: str = "timestamp") -> datetime:
    """
    Parse an ISO-8601 timestamp.

    Raises:
        ValidationError: If the string is not a valid timestamp
    """
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {name}: {value!r}") from e


def format_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="seconds")


# =============================================================================
# EXERCISE / WORKOUT
# =============================================================================


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    return {
        "name": exercise.name,
        "description": exercise.description,
        "duration": exercise.duration,
        "category": exercise.category,
        "base_level": exercise.base_level,
        "difficulty": exercise.difficulty,
        "tips": list(exercise.tips),
        "voice_instruction": exercise.voice_instruction,
        "animation_name": exercise.animation_name,
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert a dict to an Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return Exercise(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            duration=int(validate_non_negative(data["duration"], "duration")),
            category=validate_choice(data["category"], CATEGORIES, "category"),  # type: ignore[arg-type]
            base_level=validate_choice(data["base_level"], DIFFICULTIES, "base_level"),  # type: ignore[arg-type]
            difficulty=validate_choice(
                data.get("difficulty", "intermediate"), DIFFICULTIES, "difficulty"
            ),  # type: ignore[arg-type]
            tips=tuple(str(t) for t in data.get("tips", [])),
            voice_instruction=str(data.get("voice_instruction", "")),
            animation_name=str(data.get("animation_name", "")),
        )
    except KeyError as e:
        raise ValidationError(f"Missing exercise field: {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    return {
        "category": workout.category,
        "difficulty": workout.difficulty,
        "mode": workout.mode,
        "exercises": [exercise_to_dict(ex) for ex in workout.exercises],
        "total_duration": workout.total_duration,
    }


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert a dict to a Workout.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return Workout(
            category=validate_choice(data["category"], CATEGORIES, "category"),  # type: ignore[arg-type]
            difficulty=validate_choice(data["difficulty"], DIFFICULTIES, "difficulty"),  # type: ignore[arg-type]
            mode=validate_choice(data.get("mode", "normal"), WORKOUT_MODES, "mode"),  # type: ignore[arg-type]
            exercises=tuple(dict_to_exercise(ex) for ex in data.get("exercises", [])),
            total_duration=int(validate_non_negative(data["total_duration"], "total_duration")),
        )
    except KeyError as e:
        raise ValidationError(f"Missing workout field: {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


# =============================================================================
# SESSION RECORDS
# =============================================================================


def record_to_dict(record: CompletedSessionRecord) -> dict[str, Any]:
    return {
        "workout": workout_to_dict(record.workout),
        "started_at": format_timestamp(record.started_at),
        "ended_at": format_timestamp(record.ended_at) if record.ended_at else None,
        "completed": record.completed,
        "duration": record.duration,
    }


def dict_to_record(data: dict[str, Any]) -> CompletedSessionRecord:
    """
    Convert a dict to a CompletedSessionRecord.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        ended_raw = data.get("ended_at")
        return CompletedSessionRecord(
            workout=dict_to_workout(data["workout"]),
            started_at=parse_timestamp(data["started_at"], "started_at"),
            ended_at=parse_timestamp(ended_raw, "ended_at") if ended_raw else None,
            completed=bool(data["completed"]),
            duration=int(validate_non_negative(data["duration"], "duration")),
        )
    except KeyError as e:
        raise ValidationError(f"Missing session field: {e}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def record_to_json_line(record: CompletedSessionRecord) -> str:
    """Serialize a record as a single JSONL line (no trailing newline)."""
    return json.dumps(record_to_dict(record), separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# ACHIEVEMENTS / PROGRESS
# =============================================================================


def achievement_to_dict(achievement: Achievement) -> dict[str, Any]:
    return {"type": achievement.type, "earned_at": format_timestamp(achievement.earned_at)}


def dict_to_achievement(data: dict[str, Any]) -> Achievement:
    try:
        return Achievement(
            type=validate_choice(data["type"], ACHIEVEMENT_TYPES, "achievement type"),  # type: ignore[arg-type]
            earned_at=parse_timestamp(data["earned_at"], "earned_at"),
        )
    except KeyError as e:
        raise ValidationError(f"Missing achievement field: {e}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid achievement entry: {data!r}") from e


def progress_to_profile_dict(progress: UserProgress) -> dict[str, Any]:
    """Everything except history, which lives in the JSONL file."""
    return {
        "difficulty": progress.difficulty,
        "duration_minutes": progress.duration_minutes,
        "sound_enabled": progress.sound_enabled,
        "vibration_enabled": progress.vibration_enabled,
        "voice_prompts_enabled": progress.voice_prompts_enabled,
        "total_points": progress.total_points,
        "achievements": [achievement_to_dict(a) for a in progress.achievements],
    }


def profile_dict_to_progress(
    data: dict[str, Any],
    history: list[CompletedSessionRecord] | None = None,
) -> UserProgress:
    """
    Build UserProgress from a profile dict plus an already-loaded history.

    Raises:
        ValidationError: If data is invalid
    """
    raw_achievements = data.get("achievements", [])
    if not isinstance(raw_achievements, list):
        raise ValidationError("achievements must be a list")

    achievements: list[Achievement] = []
    seen: set[str] = set()
    for raw in raw_achievements:
        achievement = dict_to_achievement(raw)
        if achievement.type not in seen:
            seen.add(achievement.type)
            achievements.append(achievement)

    try:
        return UserProgress(
            difficulty=validate_choice(
                data.get("difficulty", "intermediate"), DIFFICULTIES, "difficulty"
            ),  # type: ignore[arg-type]
            duration_minutes=int(data.get("duration_minutes", 15)),
            sound_enabled=bool(data.get("sound_enabled", True)),
            vibration_enabled=bool(data.get("vibration_enabled", True)),
            voice_prompts_enabled=bool(data.get("voice_prompts_enabled", False)),
            total_points=int(validate_non_negative(data.get("total_points", 0), "total_points")),
            history=list(history or []),
            achievements=achievements,
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e
