"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of workouts, history and progress.
"""

from datetime import date, datetime

from rich.console import Console
from rich.table import Table

from ..core.achievements import ACHIEVEMENT_INFO, Evaluation
from ..core.exercises.registry import ExerciseCatalog
from ..core.metrics import (
    current_streak,
    daily_minutes,
    format_clock,
    format_total_time,
    latest_session,
    longest_streak,
    next_points_badge,
    session_points,
    sessions_newest_first,
    total_training_seconds,
)
from ..core.models import (
    ACHIEVEMENT_TYPES,
    CATEGORY_NAMES,
    DIFFICULTIES,
    CompletedSessionRecord,
    Exercise,
    UserProgress,
    Workout,
)

console = Console()

_TIER_DISPLAY: dict[str, str] = {
    "beginner": "Beg",
    "intermediate": "Int",
    "advanced": "Adv",
}


def _fmt_datetime(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M")


def _fmt_day(day: date) -> str:
    return day.strftime("%m.%d(%a)")


def print_categories(catalog: ExerciseCatalog) -> None:
    """Print every category with the number of exercises eligible per tier."""
    table = Table(title="Workout categories")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for difficulty in DIFFICULTIES:
        table.add_column(difficulty.capitalize(), justify="right")

    for category in catalog.categories():
        counts = [str(len(catalog.get_exercises(category, d))) for d in DIFFICULTIES]  # type: ignore[arg-type]
        table.add_row(category, CATEGORY_NAMES[category], *counts)
    console.print(table)


def format_workout_table(workout: Workout) -> Table:
    """
    Create a Rich table for a composed workout.

    Args:
        workout: Workout to display

    Returns:
        Rich Table object
    """
    mode = " · challenge" if workout.mode == "challenge" else ""
    table = Table(title=f"{workout.name} · {workout.difficulty}{mode}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Exercise", style="bold")
    table.add_column("Tier", justify="center")
    table.add_column("Time", justify="right")
    table.add_column("Tips", style="dim")

    for i, ex in enumerate(workout.exercises, 1):
        table.add_row(
            str(i),
            ex.name,
            _TIER_DISPLAY[ex.base_level],
            format_clock(ex.adjusted_duration),
            "; ".join(ex.tips),
        )
    return table


def print_workout(workout: Workout) -> None:
    """Print a workout table followed by its total time and points."""
    console.print(format_workout_table(workout))
    console.print(
        f"Total: [bold]{format_clock(workout.total_duration)}[/bold]"
        f"  ·  {len(workout.exercises)} exercises"
        f"  ·  [green]+{session_points(workout)} points[/green] on completion"
    )


def print_exercise_intro(exercise: Exercise, number: int, total: int) -> None:
    """Announce the exercise that is starting."""
    console.print()
    console.print(
        f"[bold cyan]{number}/{total}[/bold cyan]  [bold]{exercise.name}[/bold]"
        f"  [dim]({format_clock(exercise.adjusted_duration)})[/dim]"
    )
    console.print(f"  {exercise.description}")
    for tip in exercise.tips:
        console.print(f"  [dim]• {tip}[/dim]")


def print_evaluation(evaluation: Evaluation, total_points: int) -> None:
    """Print points earned and any achievements unlocked."""
    console.print(
        f"[green]+{evaluation.points_delta} points[/green]  (total {total_points})"
    )
    for achievement in evaluation.newly_earned:
        info = ACHIEVEMENT_INFO[achievement.type]
        console.print(f"[bold yellow]🏆 {info.title}[/bold yellow]: {info.description}")


def format_history_table(records: list[CompletedSessionRecord]) -> Table:
    """
    Create a Rich table for session history, newest first.

    Args:
        records: Session records in any order

    Returns:
        Rich Table object
    """
    table = Table(title="Workout history")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Started")
    table.add_column("Category")
    table.add_column("Level")
    table.add_column("Mode")
    table.add_column("Ex", justify="right")
    table.add_column("Time", justify="right")
    table.add_column("Status")

    for i, r in enumerate(sessions_newest_first(records), 1):
        status = "[green]✓ done[/green]" if r.completed else "[yellow]stopped[/yellow]"
        table.add_row(
            str(i),
            _fmt_datetime(r.started_at),
            r.workout.name,
            r.workout.difficulty,
            r.workout.mode,
            str(len(r.workout.exercises)),
            format_clock(r.duration),
            status,
        )
    return table


def print_history(records: list[CompletedSessionRecord]) -> None:
    """Print full history or a hint when empty."""
    if not records:
        print_info("No workouts yet. Try: solofit start warmup")
        return
    console.print(format_history_table(records))


def print_stats(progress: UserProgress, today: date | None = None) -> None:
    """Print totals, streaks, last workout and per-day minutes."""
    history = progress.history
    latest = latest_session(history)
    badge = next_points_badge(progress.total_points)

    console.print("[bold]Statistics[/bold]")
    console.print(f"  Workouts completed: {len(progress.completed_sessions)}")
    console.print(f"  Total time:         {format_total_time(total_training_seconds(history))}")
    console.print(f"  Current streak:     {current_streak(history, today)} days")
    console.print(f"  Longest streak:     {longest_streak(history)} days")
    console.print(
        f"  Last workout:       {_fmt_datetime(latest.started_at) if latest else 'No data'}"
    )
    console.print(f"  Points:             {progress.total_points}")
    if badge is not None:
        console.print(f"  Next badge:         {badge[0]} ({badge[1]} points to go)")

    days = daily_minutes(history)
    if days:
        table = Table(title="Minutes per day")
        table.add_column("Day")
        table.add_column("Minutes", justify="right")
        table.add_column("")
        peak = max(m for _, m in days) or 1
        for day, minutes in days:
            bar = "█" * max(1 if minutes else 0, round(20 * minutes / peak))
            table.add_row(_fmt_day(day), str(minutes), f"[cyan]{bar}[/cyan]")
        console.print(table)


def print_achievements(progress: UserProgress) -> None:
    """Print every achievement with its earned date, plus points progress."""
    earned = {a.type: a for a in progress.achievements}
    badge = next_points_badge(progress.total_points)
    if badge is not None:
        console.print(
            f"Points: [bold]{progress.total_points}[/bold]  ·  "
            f"{badge[1]} points to next badge ({badge[0]})"
        )
    else:
        console.print(f"Points: [bold]{progress.total_points}[/bold]  ·  all badges earned")

    table = Table(title="Achievements")
    table.add_column("")
    table.add_column("Achievement", style="bold")
    table.add_column("How to earn")
    table.add_column("Earned")
    for achievement_type in ACHIEVEMENT_TYPES:
        info = ACHIEVEMENT_INFO[achievement_type]
        got = earned.get(achievement_type)
        table.add_row(
            "🏆" if got else "·",
            info.title,
            info.description,
            _fmt_datetime(got.earned_at) if got else "—",
        )
    console.print(table)


def print_settings(progress: UserProgress) -> None:
    """Print current preferences."""
    on_off = {True: "[green]on[/green]", False: "[dim]off[/dim]"}
    console.print("[bold]Settings[/bold]")
    console.print(f"  Difficulty:     {progress.difficulty}")
    console.print(f"  Duration:       {progress.duration_minutes} min")
    console.print(f"  Sound:          {on_off[progress.sound_enabled]}")
    console.print(f"  Vibration:      {on_off[progress.vibration_enabled]}")
    console.print(f"  Voice prompts:  {on_off[progress.voice_prompts_enabled]}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
