"""
YAML → Exercise catalog loader.

Loads one YAML file per category from the bundled ``src/solofit/exercises/``
directory.  Each file holds ``category`` plus an ordered ``exercises`` list;
list order is the fixed catalog order used by the composer.

User overrides: place a file with the same name in ``~/.solofit/exercises/``.
It is deep-merged over the bundled file, so a user ``exercises`` list replaces
the bundled list for that category.  Files for unknown categories are skipped
with a warning.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..config import USER_EXERCISES_DIRNAME, get_default_data_dir
from ..models import CATEGORIES, Exercise

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "description",
        "duration",
        "base_level",
    }
)


def exercise_from_dict(d: dict, category: str) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    return Exercise(
        name=str(d["name"]),
        description=str(d["description"]),
        duration=int(d["duration"]),
        category=category,  # type: ignore[arg-type]
        base_level=str(d["base_level"]),  # type: ignore[arg-type]
        tips=tuple(str(t) for t in d.get("tips") or ()),
        voice_instruction=str(d.get("voice_instruction", "")),
        animation_name=str(d.get("animation_name", "")),
    )


def category_from_dict(d: dict, stem: str) -> tuple[str, list[Exercise]]:
    """Convert one category file to ``(category, exercises)``.

    Raises ValueError on an unknown category or a malformed entry.
    """
    category = str(d.get("category", stem))
    if category not in CATEGORIES:
        raise ValueError(f"unknown category {category!r}")
    raw_list = d.get("exercises")
    if not isinstance(raw_list, list):
        raise ValueError("'exercises' must be a list")
    return category, [exercise_from_dict(item, category) for item in raw_list]


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} when it is unreadable or not a mapping."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"solofit: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/solofit/core/exercises/loader.py
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def get_user_exercises_dir() -> Path | None:
    """Return ~/.solofit/exercises/ (or $SOLOFIT_HOME/exercises/) if it exists."""
    p = get_default_data_dir() / USER_EXERCISES_DIRNAME
    return p if p.is_dir() else None


def load_catalog_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[str, list[Exercise]] | None:
    """Return ``{category: [Exercise, ...]}`` loaded from per-category YAML files.

    Args:
        bundled_dir: Directory of bundled files (default: package data)
        user_dir: Directory of user overrides (default: ~/.solofit/exercises)

    Returns None (rather than raising) so the registry can decide how to fail.
    """
    if bundled_dir is None:
        bundled_dir = get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = get_user_exercises_dir()

    if bundled_dir is None and user_dir is None:
        return None

    stems: dict[str, Path | None] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            stems[p.stem] = p
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            stems.setdefault(p.stem, None)

    result: dict[str, list[Exercise]] = {}
    for stem, bundled_path in stems.items():
        raw = _load_yaml_file(bundled_path) if bundled_path is not None else {}
        if user_dir is not None:
            user_path = user_dir / f"{stem}.yaml"
            if user_path.exists():
                user_raw = _load_yaml_file(user_path)
                if user_raw:
                    raw = _deep_merge(raw, user_raw)
        if not raw:
            continue
        try:
            category, exercises = category_from_dict(raw, stem)
        except (ValueError, TypeError, AttributeError) as exc:
            warnings.warn(f"solofit: skipping catalog file '{stem}': {exc}", stacklevel=2)
            continue
        result[category] = exercises

    return result if result else None
