"""Shared Typer app object, shared option types, and tracker utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import CATEGORIES, DIFFICULTIES
from ..core.tracker import ProgressTracker
from ..io.progress_store import ProgressStore, get_default_store
from ..io.serializers import ValidationError
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Directory for profile.json and history.jsonl"),
]

app = typer.Typer(
    name="solofit",
    help="Solo bodyweight workouts: timed sessions, points and achievements.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> ProgressStore:
    """Get progress store from path or default location."""
    if data_dir is None:
        return get_default_store()
    return ProgressStore(data_dir)


def load_tracker(data_dir: Path | None) -> ProgressTracker:
    """Load progress into a tracker, exiting with an error on corrupt data."""
    store = get_store(data_dir)
    try:
        return ProgressTracker(store)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def check_category(category: str) -> str:
    """Normalize and validate a category argument (accepts "chest-arms" too)."""
    key = category.strip().lower().replace("-", "_")
    if key not in CATEGORIES:
        views.print_error(f"Unknown category '{category}'. Choose from: {', '.join(CATEGORIES)}")
        raise typer.Exit(1)
    return key


def check_difficulty(difficulty: str) -> str:
    key = difficulty.strip().lower()
    if key not in DIFFICULTIES:
        views.print_error(
            f"Unknown difficulty '{difficulty}'. Choose from: {', '.join(DIFFICULTIES)}"
        )
        raise typer.Exit(1)
    return key
