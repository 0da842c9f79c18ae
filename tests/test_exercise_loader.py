"""Tests for the YAML exercise catalog loader."""

import tempfile
from pathlib import Path

import pytest

from solofit.core.exercises.loader import (
    category_from_dict,
    exercise_from_dict,
    get_bundled_exercises_dir,
    load_catalog_from_yaml,
)
from solofit.core.models import CATEGORIES


@pytest.fixture
def user_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def empty_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestParsing:
    def test_exercise_from_dict(self):
        ex = exercise_from_dict(
            {
                "name": "Plank",
                "description": "Hold",
                "duration": 30,
                "base_level": "beginner",
                "tips": ["Straight line"],
            },
            "chest_arms",
        )
        assert ex.category == "chest_arms"
        assert ex.tips == ("Straight line",)
        assert ex.voice_instruction == ""

    def test_missing_fields(self):
        with pytest.raises(ValueError, match="missing fields"):
            exercise_from_dict({"name": "Plank"}, "chest_arms")

    def test_bad_base_level(self):
        with pytest.raises(ValueError, match="base_level"):
            exercise_from_dict(
                {"name": "X", "description": "", "duration": 10, "base_level": "expert"},
                "legs",
            )

    def test_unknown_category(self):
        with pytest.raises(ValueError, match="unknown category"):
            category_from_dict({"category": "cardio", "exercises": []}, "cardio")

    def test_category_defaults_to_file_stem(self):
        category, exercises = category_from_dict({"exercises": []}, "yoga")
        assert category == "yoga"
        assert exercises == []


class TestLoadCatalog:
    def test_bundled_catalog_complete(self, empty_dir):
        catalog = load_catalog_from_yaml(user_dir=empty_dir)
        assert set(catalog) == set(CATEGORIES)
        assert [ex.name for ex in catalog["legs"]][:2] == ["Squats", "Lunges"]

    def test_user_file_replaces_exercise_list(self, user_dir):
        (user_dir / "legs.yaml").write_text(
            "exercises:\n"
            "  - name: Wall Sit\n"
            "    description: Back against the wall\n"
            "    duration: 60\n"
            "    base_level: beginner\n",
            encoding="utf-8",
        )

        catalog = load_catalog_from_yaml(user_dir=user_dir)

        assert [ex.name for ex in catalog["legs"]] == ["Wall Sit"]
        assert len(catalog["yoga"]) == 5

    def test_invalid_user_file_skipped_with_warning(self, user_dir):
        (user_dir / "hiit.yaml").write_text("exercises: not-a-list\n", encoding="utf-8")

        with pytest.warns(UserWarning, match="hiit"):
            catalog = load_catalog_from_yaml(user_dir=user_dir)

        assert "hiit" not in catalog
        assert "legs" in catalog

    def test_nothing_to_load(self, empty_dir):
        assert load_catalog_from_yaml(bundled_dir=empty_dir, user_dir=empty_dir) is None

    def test_bundled_dir_found(self):
        assert get_bundled_exercises_dir() is not None
