"""
Progress tracker: the single owner of UserProgress.

Receives archived session records from the engine, runs the achievement
evaluator on completed sessions, applies points and unlocks, and saves
through the persistence provider after every mutation.  A failed save is
logged and reported, never raised; the in-memory state stays authoritative
and the next successful save carries it.

Not safe for concurrent writers: one tracker, one caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Protocol

from .achievements import Evaluation, evaluate
from .composer import compose_for
from .config import ALLOWED_DURATIONS
from .exercises.registry import CatalogProvider
from .models import (
    DIFFICULTIES,
    Category,
    CompletedSessionRecord,
    Difficulty,
    UserProgress,
    Workout,
    WorkoutMode,
)
from .session import Listener, SessionEngine, SessionEvent, Ticker

logger = logging.getLogger(__name__)


class ProgressProvider(Protocol):
    """Persistence boundary for UserProgress; saving reports failure instead of raising."""

    def load_progress(self) -> UserProgress:
        ...

    def save_progress(self, progress: UserProgress) -> bool:
        ...


@dataclass
class SessionOutcome:
    """What archiving one session changed."""

    record: CompletedSessionRecord
    evaluation: Evaluation | None = None  # None for stopped sessions
    saved: bool = True

    @property
    def points_delta(self) -> int:
        return self.evaluation.points_delta if self.evaluation else 0

    @property
    def unlocked(self) -> list[str]:
        return self.evaluation.types if self.evaluation else []


@dataclass
class PreferenceUpdate:
    """Result of a preference change."""

    changed: list[str] = field(default_factory=list)
    saved: bool = True


class ProgressTracker:
    """
    Owns UserProgress and keeps it persisted.

    Args:
        store: Persistence provider (``load_progress`` / ``save_progress``)
        listener: Receives ``achievement_unlocked`` events
        clock: Timestamp source for achievements
        catalog: Catalog provider used by ``compose``
    """

    def __init__(
        self,
        store: ProgressProvider,
        listener: Listener | None = None,
        clock: Callable[[], datetime] = datetime.now,
        catalog: CatalogProvider | None = None,
    ):
        self.store = store
        self._listener = listener
        self._clock = clock
        self._catalog = catalog
        self.progress: UserProgress = store.load_progress()
        self.last_save_ok = True
        self.last_outcome: SessionOutcome | None = None

    # ── workouts ────────────────────────────────────────────────────────────

    def compose(self, category: Category, mode: WorkoutMode = "normal") -> Workout:
        """Compose a workout with the stored difficulty and duration."""
        return compose_for(self.progress, category, mode=mode, catalog=self._catalog)

    def create_engine(self, ticker: Ticker, listener: Listener | None = None) -> SessionEngine:
        """Session engine whose finished sessions are archived here."""
        return SessionEngine(ticker, archive=self.archive, listener=listener, clock=self._clock)

    def archive(self, record: CompletedSessionRecord) -> SessionOutcome:
        """
        Append a finished session; evaluate and award it if completed.

        Args:
            record: Record produced by the engine on stop or completion

        Returns:
            SessionOutcome with the evaluation (completed only) and save status
        """
        self.progress.append_record(record)

        evaluation: Evaluation | None = None
        if record.completed:
            evaluation = evaluate(
                self.progress.history,
                record,
                self.progress.earned_types,
                total_points=self.progress.total_points,
                now=self._clock(),
            )
            self.progress.add_points(evaluation.points_delta)
            for achievement in evaluation.newly_earned:
                if self.progress.add_achievement(achievement):
                    self._emit(SessionEvent("achievement_unlocked", achievement=achievement))

        outcome = SessionOutcome(record=record, evaluation=evaluation, saved=self._save())
        self.last_outcome = outcome
        return outcome

    # ── preferences ─────────────────────────────────────────────────────────

    def update_preferences(
        self,
        difficulty: Difficulty | None = None,
        duration_minutes: int | None = None,
        sound_enabled: bool | None = None,
        vibration_enabled: bool | None = None,
        voice_prompts_enabled: bool | None = None,
    ) -> PreferenceUpdate:
        """
        Change any subset of preferences and save if anything changed.

        Raises:
            ValueError: On an unknown difficulty or unsupported duration
        """
        if difficulty is not None and difficulty not in DIFFICULTIES:
            raise ValueError(f"Invalid difficulty: {difficulty!r}. Must be one of {DIFFICULTIES}")
        if duration_minutes is not None and duration_minutes not in ALLOWED_DURATIONS:
            raise ValueError(
                f"Invalid duration: {duration_minutes}. Must be one of {ALLOWED_DURATIONS}"
            )

        requested = {
            "difficulty": difficulty,
            "duration_minutes": duration_minutes,
            "sound_enabled": sound_enabled,
            "vibration_enabled": vibration_enabled,
            "voice_prompts_enabled": voice_prompts_enabled,
        }
        update = PreferenceUpdate()
        for name, value in requested.items():
            if value is None or getattr(self.progress, name) == value:
                continue
            setattr(self.progress, name, value)
            update.changed.append(name)

        if update.changed:
            update.saved = self._save()
        return update

    # ── maintenance ─────────────────────────────────────────────────────────

    def reset_history(self) -> bool:
        """Bulk-clear history; points and achievements are kept. Returns save status."""
        self.progress.reset_history()
        logger.info("History reset")
        return self._save()

    def _save(self) -> bool:
        ok = bool(self.store.save_progress(self.progress))
        if not ok:
            logger.warning("Progress not saved; keeping in-memory state")
        self.last_save_ok = ok
        return ok

    def _emit(self, event: SessionEvent) -> None:
        if self._listener is not None:
            self._listener(event)
