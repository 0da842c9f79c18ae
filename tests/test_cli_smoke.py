"""
Minimal smoke tests for the solofit CLI.

Tests basic functionality:
- App runs without errors
- Workouts preview and run (instant ticks)
- History, stats and achievements render
- Settings persist
- Reset clears history but keeps points
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from solofit.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _run_legs(data_dir: Path):
    return runner.invoke(app, [
        "start", "legs",
        "--data-dir", str(data_dir),
        "--difficulty", "beginner",
        "--minutes", "10",
        "--tick-seconds", "0",
    ])


def _profile(data_dir: Path) -> dict:
    return json.loads((data_dir / "profile.json").read_text(encoding="utf-8"))


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "workout" in result.output.lower()

    def test_categories(self):
        result = runner.invoke(app, ["categories"])
        assert result.exit_code == 0
        assert "Legs" in result.output
        assert "chest_arms" in result.output

    def test_preview_json(self, temp_data_dir):
        result = runner.invoke(app, [
            "preview", "legs",
            "--data-dir", str(temp_data_dir),
            "--difficulty", "beginner",
            "--minutes", "10",
            "--json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [ex["name"] for ex in data["exercises"]] == ["Squats", "Lunges", "Calf Raises"]
        assert data["total_duration"] == 80
        # 3 x 10 + max(1, 80 // 60) x 5
        assert data["points"] == 35

    def test_preview_table(self, temp_data_dir):
        result = runner.invoke(app, ["preview", "chest-arms", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 0
        assert "Push-ups" in result.output

    def test_preview_does_not_write_files(self, temp_data_dir):
        runner.invoke(app, ["preview", "yoga", "--data-dir", str(temp_data_dir)])
        assert not (temp_data_dir / "profile.json").exists()

    def test_unknown_category_fails(self, temp_data_dir):
        result = runner.invoke(app, ["preview", "cardio", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 1
        assert "Unknown category" in result.output

    def test_start_runs_and_records(self, temp_data_dir):
        result = _run_legs(temp_data_dir)

        assert result.exit_code == 0, result.output
        assert "Squats" in result.output
        assert "complete" in result.output
        lines = (temp_data_dir / "history.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["completed"] is True
        assert record["duration"] == 80
        profile = _profile(temp_data_dir)
        assert profile["total_points"] == 35
        assert "first_workout" in [a["type"] for a in profile["achievements"]]

    def test_history_json_after_start(self, temp_data_dir):
        _run_legs(temp_data_dir)
        _run_legs(temp_data_dir)

        result = runner.invoke(app, ["history", "--data-dir", str(temp_data_dir), "--json"])

        assert result.exit_code == 0
        records = json.loads(result.stdout)
        assert len(records) == 2
        assert all(r["workout"]["category"] == "legs" for r in records)

    def test_history_empty(self, temp_data_dir):
        result = runner.invoke(app, ["history", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 0
        assert "No workouts yet" in result.output

    def test_stats_and_achievements(self, temp_data_dir):
        _run_legs(temp_data_dir)

        stats = runner.invoke(app, ["stats", "--data-dir", str(temp_data_dir)])
        assert stats.exit_code == 0
        assert "Workouts completed: 1" in stats.output

        achievements = runner.invoke(app, ["achievements", "--data-dir", str(temp_data_dir)])
        assert achievements.exit_code == 0
        assert "First Workout" in achievements.output
        assert "65 points to next badge" in achievements.output


class TestSettingsAndReset:
    def test_settings_show_defaults(self, temp_data_dir):
        result = runner.invoke(app, ["settings", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 0
        assert "intermediate" in result.output
        assert "15 min" in result.output

    def test_settings_update_persists(self, temp_data_dir):
        result = runner.invoke(app, [
            "settings",
            "--data-dir", str(temp_data_dir),
            "--difficulty", "advanced",
            "--minutes", "30",
            "--no-sound",
        ])

        assert result.exit_code == 0
        profile = _profile(temp_data_dir)
        assert profile["difficulty"] == "advanced"
        assert profile["duration_minutes"] == 30
        assert profile["sound_enabled"] is False

    def test_settings_reject_bad_duration(self, temp_data_dir):
        result = runner.invoke(app, ["settings", "--data-dir", str(temp_data_dir), "--minutes", "20"])
        assert result.exit_code == 1
        assert not (temp_data_dir / "profile.json").exists()

    def test_start_uses_saved_settings(self, temp_data_dir):
        runner.invoke(app, [
            "settings", "--data-dir", str(temp_data_dir),
            "--difficulty", "beginner", "--minutes", "10",
        ])

        result = runner.invoke(app, [
            "start", "legs", "--data-dir", str(temp_data_dir), "--tick-seconds", "0",
        ])

        assert result.exit_code == 0, result.output
        assert _profile(temp_data_dir)["total_points"] == 35

    def test_reset_keeps_points(self, temp_data_dir):
        _run_legs(temp_data_dir)

        result = runner.invoke(app, ["reset", "--data-dir", str(temp_data_dir), "--yes"])

        assert result.exit_code == 0
        assert (temp_data_dir / "history.jsonl").read_text(encoding="utf-8") == ""
        assert _profile(temp_data_dir)["total_points"] == 35

    def test_reset_cancelled(self, temp_data_dir):
        _run_legs(temp_data_dir)

        result = runner.invoke(app, ["reset", "--data-dir", str(temp_data_dir)], input="n\n")

        assert result.exit_code == 0
        lines = (temp_data_dir / "history.jsonl").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1

    def test_corrupt_history_reports_error(self, temp_data_dir):
        (temp_data_dir / "history.jsonl").write_text("garbage\n", encoding="utf-8")
        result = runner.invoke(app, ["stats", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 1
        assert "line 1" in result.output

    @pytest.mark.parametrize("profile", ["[]", "{\"achievements\": [\"x\"]}"])
    def test_corrupt_profile_reports_error(self, temp_data_dir, profile):
        (temp_data_dir / "profile.json").write_text(profile, encoding="utf-8")
        result = runner.invoke(app, ["stats", "--data-dir", str(temp_data_dir)])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Error" in result.output
