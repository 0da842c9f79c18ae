"""
JSON/JSONL-based storage for user progress.

Two files live in the data directory:

- ``profile.json``: preferences, total points and earned achievements
- ``history.jsonl``: one session record per line, in insertion order

ProgressStore implements the persistence provider contract used by the
tracker (``core.tracker.ProgressProvider``).  Saving never raises;
it reports failure with a False return so in-memory state stays authoritative.
"""

import json
import logging
import os
from pathlib import Path

from ..core.config import HISTORY_FILENAME, PROFILE_FILENAME, get_default_data_dir
from ..core.models import CompletedSessionRecord, UserProgress
from .serializers import (
    ValidationError,
    dict_to_record,
    profile_dict_to_progress,
    progress_to_profile_dict,
    record_to_json_line,
)

logger = logging.getLogger(__name__)


class ProgressStore:
    """
    Manages profile and history files in one data directory.

    Args:
        data_dir: Directory holding profile.json and history.jsonl
    """

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)
        self.profile_path = self.data_dir / PROFILE_FILENAME
        self.history_path = self.data_dir / HISTORY_FILENAME

    def exists(self) -> bool:
        """Check if the profile file exists."""
        return self.profile_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty files if they don't exist.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.history_path.exists():
            self.history_path.touch()
        if not self.profile_path.exists():
            self._write_profile(UserProgress())

    def load_history(self) -> list[CompletedSessionRecord]:
        """
        Load all session records in insertion order.

        Returns:
            List of records (empty if the file doesn't exist)

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            return []

        records: list[CompletedSessionRecord] = []
        with open(self.history_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(dict_to_record(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e
        return records

    def load_progress(self) -> UserProgress:
        """
        Load preferences, points, achievements and history.

        Returns defaults when nothing has been saved yet.

        Raises:
            ValidationError: If stored data is corrupt
        """
        history = self.load_history()
        if not self.profile_path.exists():
            return UserProgress(history=history)

        try:
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid profile file {self.profile_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValidationError(f"Invalid profile file {self.profile_path}: expected a JSON object")

        return profile_dict_to_progress(data, history)

    def save_progress(self, progress: UserProgress) -> bool:
        """
        Write profile and full history.

        Returns:
            True on success, False if the files could not be written
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._write_history(progress.history)
            self._write_profile(progress)
        except OSError as e:
            logger.warning("Could not save progress to %s: %s", self.data_dir, e)
            return False
        return True

    def _write_history(self, records: list[CompletedSessionRecord]) -> None:
        tmp = self.history_path.with_suffix(".jsonl.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            for record in records:
                f.write(record_to_json_line(record) + "\n")
        os.replace(tmp, self.history_path)

    def _write_profile(self, progress: UserProgress) -> None:
        tmp = self.profile_path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(progress_to_profile_dict(progress), f, indent=2)
        os.replace(tmp, self.profile_path)


def get_default_store() -> ProgressStore:
    """
    Get a ProgressStore at the default data directory.

    Returns:
        ProgressStore instance
    """
    return ProgressStore(get_default_data_dir())
