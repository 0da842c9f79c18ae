"""Workout commands: categories, preview, start."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.composer import compose
from ...core.config import TICK_SECONDS
from ...core.exercises.registry import get_catalog
from ...core.metrics import format_clock, session_points
from ...core.models import Workout
from ...core.session import BlockingTicker, SessionEngine, SessionEvent
from ...core.tracker import ProgressTracker
from ...io.serializers import workout_to_dict
from .. import views
from ..app import DataDirOption, app, check_category, check_difficulty, load_tracker

CategoryArgument = Annotated[
    str,
    typer.Argument(help="Category: warmup, chest_arms, legs, hiit, stretching, yoga"),
]
DifficultyOption = Annotated[
    Optional[str],
    typer.Option("--difficulty", "-d", help="beginner, intermediate or advanced (default: saved setting)"),
]
MinutesOption = Annotated[
    Optional[int],
    typer.Option("--minutes", "-m", help="Duration budget: 10, 15 or 30 (default: saved setting)"),
]
ChallengeOption = Annotated[
    bool,
    typer.Option("--challenge", help="Challenge mode: every eligible exercise, no time budget"),
]


def _compose_from_options(
    data_dir: Path | None,
    category: str,
    difficulty: str | None,
    minutes: int | None,
    challenge: bool,
) -> tuple[ProgressTracker, Workout]:
    tracker = load_tracker(data_dir)
    key = check_category(category)
    level = check_difficulty(difficulty) if difficulty is not None else tracker.progress.difficulty
    budget = minutes if minutes is not None else tracker.progress.duration_minutes
    if budget <= 0:
        views.print_error("--minutes must be positive")
        raise typer.Exit(1)

    workout = compose(
        key,  # type: ignore[arg-type]
        level,  # type: ignore[arg-type]
        budget,
        mode="challenge" if challenge else "normal",
    )
    return tracker, workout


@app.command()
def categories() -> None:
    """
    List workout categories and how many exercises each tier can do.
    """
    views.print_categories(get_catalog())


@app.command()
def preview(
    category: CategoryArgument,
    data_dir: DataDirOption = None,
    difficulty: DifficultyOption = None,
    minutes: MinutesOption = None,
    challenge: ChallengeOption = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Compose a workout and show it without starting.
    """
    _, workout = _compose_from_options(data_dir, category, difficulty, minutes, challenge)

    if json_out:
        output = workout_to_dict(workout)
        output["points"] = session_points(workout)
        print(json.dumps(output, indent=2))
        return

    if workout.is_empty:
        views.print_warning("No exercises fit this time budget. Try a longer duration.")
        return
    views.print_workout(workout)


def _make_display(engine_ref: list[SessionEngine], sound: bool):
    """Listener and per-tick hook that narrate a running session."""

    def on_event(event: SessionEvent) -> None:
        engine = engine_ref[0]
        if event.kind in ("started", "exercise_advanced") and event.exercise is not None:
            views.print_exercise_intro(event.exercise, engine.exercise_number, engine.total_exercises)
            nxt = engine.next_exercise
            if nxt is not None:
                views.console.print(f"  [dim]Next: {nxt.name}[/dim]")

    def after_tick() -> None:
        engine = engine_ref[0]
        session = engine.session
        if session is None or not session.countdown:
            return
        if sound:
            views.console.bell()
        views.console.print(f"  [yellow]{engine.remaining}…[/yellow]")

    return on_event, after_tick


def _print_outcome(workout: Workout, tracker: ProgressTracker) -> None:
    outcome = tracker.last_outcome
    if outcome is None:
        return

    record = outcome.record
    views.console.print()
    if record.completed:
        views.print_success(f"{workout.name} complete in {format_clock(record.duration)}!")
        if outcome.evaluation is not None:
            views.print_evaluation(outcome.evaluation, tracker.progress.total_points)
    else:
        views.print_warning(
            f"Workout stopped after {format_clock(record.duration)}. No points awarded."
        )

    if not outcome.saved:
        views.print_warning("Progress could not be saved; it will be written on the next save.")


@app.command()
def start(
    category: CategoryArgument,
    data_dir: DataDirOption = None,
    difficulty: DifficultyOption = None,
    minutes: MinutesOption = None,
    challenge: ChallengeOption = False,
    tick_seconds: Annotated[
        float,
        typer.Option("--tick-seconds", help="Seconds per timer tick (0 runs instantly)"),
    ] = TICK_SECONDS,
) -> None:
    """
    Run a timed workout. Press Ctrl-C to stop early.
    """
    if tick_seconds < 0:
        views.print_error("--tick-seconds must be non-negative")
        raise typer.Exit(1)

    tracker, workout = _compose_from_options(data_dir, category, difficulty, minutes, challenge)
    if workout.is_empty:
        views.print_error("No exercises fit this time budget. Try a longer duration.")
        raise typer.Exit(1)

    views.print_workout(workout)

    engine_ref: list[SessionEngine] = []
    on_event, after_tick = _make_display(engine_ref, tracker.progress.sound_enabled)
    ticker = BlockingTicker(interval=tick_seconds, after_tick=after_tick)
    engine = tracker.create_engine(ticker, listener=on_event)
    engine_ref.append(engine)

    if not engine.start(workout):
        views.print_error(engine.last_error or "Could not start workout")
        raise typer.Exit(1)

    try:
        ticker.run()
    except KeyboardInterrupt:
        engine.stop()

    _print_outcome(workout, tracker)
