"""
Session engine: the per-second countdown state machine for one workout.

States::

    idle → active ⇄ paused → completed
             active | paused → stopped

The engine never reads a wall clock on its own.  A Ticker delivers the
one-second signal and a ``clock`` callable supplies timestamps, so tests can
step time deterministically with ManualTicker.

Invalid operations are refused without raising: the method returns False,
state is untouched, ``last_error`` is set and an ``invalid_operation`` event
is emitted.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Literal, Protocol

from .config import COUNTDOWN_WINDOW_SECONDS, TICK_SECONDS
from .metrics import format_clock
from .models import Achievement, CompletedSessionRecord, Exercise, Workout

logger = logging.getLogger(__name__)

SessionState = Literal["idle", "active", "paused", "completed", "stopped"]
EventKind = Literal[
    "started",
    "exercise_advanced",
    "paused",
    "resumed",
    "stopped",
    "completed",
    "invalid_operation",
    "achievement_unlocked",
]


@dataclass(frozen=True)
class SessionEvent:
    """Observational notification for the host (sound, haptics, display)."""

    kind: EventKind
    exercise: Exercise | None = None
    index: int | None = None
    record: CompletedSessionRecord | None = None
    achievement: Achievement | None = None
    operation: str | None = None
    reason: str | None = None


Listener = Callable[[SessionEvent], None]


# =============================================================================
# TICK SOURCES
# =============================================================================


class Ticker(Protocol):
    """Periodic one-second signal that can be started and cancelled."""

    def start(self, callback: Callable[[], None]) -> None:
        ...

    def cancel(self) -> None:
        ...


class ManualTicker:
    """Ticker stepped explicitly by the caller (tests, simulations)."""

    def __init__(self) -> None:
        self._callback: Callable[[], None] | None = None
        self.starts = 0
        self.cancels = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self._callback = None
        self.cancels += 1

    def step(self, count: int = 1) -> int:
        """
        Deliver up to ``count`` ticks; stops early once cancelled.

        Returns:
            Number of ticks actually delivered
        """
        delivered = 0
        for _ in range(count):
            callback = self._callback
            if callback is None:
                break
            callback()
            delivered += 1
        return delivered


class BlockingTicker:
    """
    Real-time ticker that runs on the caller's thread.

    ``run()`` sleeps ``interval`` seconds between ticks and returns once the
    ticker is cancelled (completion, stop or pause).  A KeyboardInterrupt
    raised during the sleep propagates to the caller.  ``after_tick`` runs
    after every delivered tick (display refresh).
    """

    def __init__(
        self,
        interval: float = TICK_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        after_tick: Callable[[], None] | None = None,
    ):
        self.interval = interval
        self._sleep = sleep
        self._after_tick = after_tick
        self._callback: Callable[[], None] | None = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def cancel(self) -> None:
        self._callback = None

    def run(self) -> int:
        """Block until cancelled; return the number of ticks delivered."""
        ticks = 0
        while self._callback is not None:
            self._sleep(self.interval)
            callback = self._callback
            if callback is None:
                break
            callback()
            ticks += 1
            if self._after_tick is not None:
                self._after_tick()
        return ticks


# =============================================================================
# SESSION RECORD
# =============================================================================


@dataclass
class Session:
    """Mutable runtime record for the workout being performed."""

    workout: Workout
    started_at: datetime
    index: int = 0
    remaining: int = 0
    elapsed: int = 0
    progress: float = 0.0
    state: SessionState = "active"
    countdown: bool = False  # True during the last seconds of an exercise

    @property
    def current_exercise(self) -> Exercise:
        return self.workout.exercises[self.index]

    @property
    def finished_duration(self) -> int:
        """Adjusted duration of every exercise before the current one."""
        return sum(ex.adjusted_duration for ex in self.workout.exercises[: self.index])

    def compute_progress(self) -> float:
        total = self.workout.total_duration
        if total <= 0:
            return 0.0
        done = self.finished_duration + (self.current_exercise.adjusted_duration - self.remaining)
        return min(1.0, max(0.0, done / total))


# =============================================================================
# ENGINE
# =============================================================================


class SessionEngine:
    """
    Drives one workout at a time through the session state machine.

    Args:
        ticker: Source of the one-second signal
        archive: Called exactly once with the record when a session stops or completes
        listener: Receives SessionEvent notifications
        clock: Timestamp source (default: local ``datetime.now``)
    """

    def __init__(
        self,
        ticker: Ticker,
        archive: Callable[[CompletedSessionRecord], None] | None = None,
        listener: Listener | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.ticker = ticker
        self._archive = archive
        self._listener = listener
        self._clock = clock
        self.session: Session | None = None
        self.record: CompletedSessionRecord | None = None
        self.last_error: str | None = None

    # ── state queries ───────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self.session.state if self.session is not None else "idle"

    @property
    def workout(self) -> Workout | None:
        return self.session.workout if self.session is not None else None

    @property
    def current_exercise(self) -> Exercise | None:
        return self.session.current_exercise if self.session is not None else None

    @property
    def next_exercise(self) -> Exercise | None:
        s = self.session
        if s is None or s.index + 1 >= len(s.workout.exercises):
            return None
        return s.workout.exercises[s.index + 1]

    @property
    def remaining(self) -> int:
        return self.session.remaining if self.session is not None else 0

    @property
    def elapsed(self) -> int:
        return self.session.elapsed if self.session is not None else 0

    @property
    def progress(self) -> float:
        return self.session.progress if self.session is not None else 0.0

    @property
    def exercise_number(self) -> int:
        """1-based position of the current exercise (0 when idle)."""
        return self.session.index + 1 if self.session is not None else 0

    @property
    def total_exercises(self) -> int:
        return len(self.session.workout.exercises) if self.session is not None else 0

    @property
    def is_last_exercise(self) -> bool:
        s = self.session
        return s is not None and s.index == len(s.workout.exercises) - 1

    @property
    def can_go_back(self) -> bool:
        # No per-exercise history buffer is kept, so rewinding is never offered.
        return False

    @property
    def formatted_remaining(self) -> str:
        return format_clock(self.remaining)

    @property
    def formatted_elapsed(self) -> str:
        return format_clock(self.elapsed)

    # ── transitions ─────────────────────────────────────────────────────────

    def start(self, workout: Workout) -> bool:
        """Begin ``workout`` from idle; refuses empty workouts."""
        if self.state != "idle":
            return self._reject("start", f"engine is {self.state}")
        if workout.is_empty:
            return self._reject("start", "workout has no exercises")

        first = workout.exercises[0]
        self.session = Session(
            workout=workout,
            started_at=self._clock(),
            remaining=first.adjusted_duration,
        )
        self.record = None
        self.last_error = None
        logger.debug("Session started: %s, %d exercises", workout.name, len(workout.exercises))
        self._emit(SessionEvent("started", exercise=first, index=0))
        self.ticker.start(self.tick)
        return True

    def tick(self) -> bool:
        """
        Advance the clock by one second.

        Silently ignored while paused; moves to the next exercise as soon as
        the current one runs out.
        """
        s = self.session
        if s is None or s.state in ("completed", "stopped"):
            return self._reject("tick", f"engine is {self.state}")
        if s.state == "paused":
            return False

        if s.remaining > 0:
            s.remaining -= 1
            s.elapsed += 1
        s.progress = s.compute_progress()
        s.countdown = 0 < s.remaining <= COUNTDOWN_WINDOW_SECONDS

        if s.remaining <= 0:
            self.advance()
        return True

    def advance(self) -> bool:
        """Move to the next exercise, or complete the session after the last one."""
        s = self.session
        if s is None or s.state not in ("active", "paused"):
            return self._reject("advance", f"engine is {self.state}")

        if s.index + 1 < len(s.workout.exercises):
            s.index += 1
            s.remaining = s.current_exercise.adjusted_duration
            s.countdown = False
            s.progress = s.compute_progress()
            logger.debug("Advanced to exercise %d: %s", s.index + 1, s.current_exercise.name)
            self._emit(SessionEvent("exercise_advanced", exercise=s.current_exercise, index=s.index))
            return True

        self._finish(completed=True)
        return True

    def skip(self) -> bool:
        """Manual skip forward; same as advance()."""
        return self.advance()

    def previous(self) -> bool:
        """Going back is not supported; always a no-op."""
        logger.debug("previous() ignored: rewinding is not supported")
        return False

    def pause(self) -> bool:
        s = self.session
        if s is None or s.state != "active":
            return self._reject("pause", f"engine is {self.state}")
        s.state = "paused"
        self.ticker.cancel()
        logger.debug("Session paused at %ds remaining", s.remaining)
        self._emit(SessionEvent("paused", exercise=s.current_exercise, index=s.index))
        return True

    def resume(self) -> bool:
        s = self.session
        if s is None or s.state != "paused":
            return self._reject("resume", f"engine is {self.state}")
        s.state = "active"
        logger.debug("Session resumed at %ds remaining", s.remaining)
        self._emit(SessionEvent("resumed", exercise=s.current_exercise, index=s.index))
        self.ticker.start(self.tick)
        return True

    def stop(self) -> bool:
        """Abort the session; archives an incomplete record."""
        if self.state not in ("active", "paused"):
            return self._reject("stop", f"engine is {self.state}")
        self._finish(completed=False)
        return True

    def reset(self) -> bool:
        """Return a finished engine to idle so another workout can start."""
        if self.state in ("active", "paused"):
            return self._reject("reset", f"engine is {self.state}")
        self.session = None
        self.last_error = None
        return True

    # ── internals ───────────────────────────────────────────────────────────

    def _finish(self, completed: bool) -> None:
        s = self.session
        if s is None:
            raise RuntimeError("No session to finish")
        self.ticker.cancel()
        s.state = "completed" if completed else "stopped"
        s.countdown = False
        if completed:
            s.progress = 1.0

        record = CompletedSessionRecord(
            workout=s.workout,
            started_at=s.started_at,
            ended_at=self._clock() if completed else None,
            completed=completed,
            duration=s.elapsed,
        )
        self.record = record
        logger.info(
            "Session %s after %ds: %s", s.state, s.elapsed, s.workout.name
        )
        if self._archive is not None:
            self._archive(record)
        self._emit(SessionEvent(s.state, record=record))  # type: ignore[arg-type]

    def _reject(self, operation: str, reason: str) -> bool:
        self.last_error = f"{operation}: {reason}"
        logger.warning("Invalid session operation %s (%s)", operation, reason)
        self._emit(SessionEvent("invalid_operation", operation=operation, reason=reason))
        return False

    def _emit(self, event: SessionEvent) -> None:
        if self._listener is not None:
            self._listener(event)
