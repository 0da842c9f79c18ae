"""Settings command: show or change preferences."""

from typing import Annotated, Optional

import typer

from .. import views
from ..app import DataDirOption, app, check_difficulty, load_tracker


@app.command()
def settings(
    data_dir: DataDirOption = None,
    difficulty: Annotated[
        Optional[str],
        typer.Option("--difficulty", "-d", help="beginner, intermediate or advanced"),
    ] = None,
    minutes: Annotated[
        Optional[int],
        typer.Option("--minutes", "-m", help="Workout duration: 10, 15 or 30"),
    ] = None,
    sound: Annotated[
        Optional[bool],
        typer.Option("--sound/--no-sound", help="Countdown sound"),
    ] = None,
    vibration: Annotated[
        Optional[bool],
        typer.Option("--vibration/--no-vibration", help="Vibration cues"),
    ] = None,
    voice: Annotated[
        Optional[bool],
        typer.Option("--voice/--no-voice", help="Voice prompts"),
    ] = None,
) -> None:
    """
    Show preferences, or update the ones given.
    """
    tracker = load_tracker(data_dir)
    if difficulty is not None:
        difficulty = check_difficulty(difficulty)

    try:
        update = tracker.update_preferences(
            difficulty=difficulty,  # type: ignore[arg-type]
            duration_minutes=minutes,
            sound_enabled=sound,
            vibration_enabled=vibration,
            voice_prompts_enabled=voice,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if update.changed:
        if update.saved:
            views.print_success(f"Updated: {', '.join(update.changed)}")
        else:
            views.print_warning("Settings changed but could not be saved.")
    views.print_settings(tracker.progress)
