"""Progress commands: history, stats, achievements, reset."""

import json
from typing import Annotated

import typer

from ...core.metrics import sessions_newest_first
from ...io.serializers import record_to_dict
from .. import views
from ..app import DataDirOption, app, load_tracker


@app.command()
def history(
    data_dir: DataDirOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show workout history, newest first.
    """
    tracker = load_tracker(data_dir)
    records = tracker.progress.history

    if json_out:
        print(json.dumps([record_to_dict(r) for r in sessions_newest_first(records)], indent=2))
        return

    views.print_history(records)


@app.command()
def stats(data_dir: DataDirOption = None) -> None:
    """
    Show totals, streaks and minutes trained per day.
    """
    tracker = load_tracker(data_dir)
    views.print_stats(tracker.progress)


@app.command()
def achievements(data_dir: DataDirOption = None) -> None:
    """
    Show every achievement, when it was earned, and points to the next badge.
    """
    tracker = load_tracker(data_dir)
    views.print_achievements(tracker.progress)


@app.command()
def reset(
    data_dir: DataDirOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Clear workout history. Points and achievements are kept.
    """
    tracker = load_tracker(data_dir)
    count = len(tracker.progress.history)
    if count == 0:
        views.print_info("History is already empty.")
        return

    if not yes and not views.confirm_action(f"Delete all {count} workout records?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    if tracker.reset_history():
        views.print_success(f"Deleted {count} workout records.")
    else:
        views.print_warning("History cleared in memory but could not be saved.")
        raise typer.Exit(1)
