"""
CLI entry point using Typer.

Provides commands for solo workouts:
- categories: List workout categories
- preview: Compose and show a workout
- start: Run a timed workout session
- history: Show past sessions
- stats: Show totals, streaks and daily minutes
- achievements: Show earned and pending achievements
- settings: Show or change preferences
- reset: Clear workout history
"""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .app import app
from .commands import progress, settings, workouts  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    """
    Solo bodyweight workouts with timed sessions, points and achievements.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
