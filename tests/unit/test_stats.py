from __future__ import annotations

from typing import Any, Dict

from liftplan.core.convert import convert_to_modular
from liftplan.core.models import PlanFormat
from liftplan.core.schema import parse_plan
from liftplan.core.stats import compute_stats


def test_stats_for_legacy_plan(legacy_plan: Dict[str, Any]) -> None:
    stats = compute_stats(parse_plan(legacy_plan))

    assert stats.format is PlanFormat.LEGACY
    assert stats.total_exercises == 7
    assert stats.total_modules == 0
    # Second day has no total; it counts as 0 minutes: 45 / 2 rounds half up.
    assert stats.average_duration == 23
    assert stats.muscle_groups == [
        "chest",
        "triceps",
        "lats",
        "rhomboids",
        "shoulders",
        "quadriceps",
        "glutes",
        "hamstrings",
        "core",
    ]
    assert stats.unique_muscle_groups == 9


def test_stats_for_modular_plan(modular_plan: Dict[str, Any]) -> None:
    stats = compute_stats(parse_plan(modular_plan))

    assert stats.format is PlanFormat.MODULAR
    assert stats.total_exercises == 3
    assert stats.total_modules == 3
    assert stats.average_duration == 50
    assert stats.unique_muscle_groups == 5


def test_stats_agree_across_formats(legacy_plan: Dict[str, Any]) -> None:
    legacy_plan["workouts"][1]["total_duration_minutes"] = 60
    legacy = compute_stats(parse_plan(legacy_plan))
    modular = compute_stats(convert_to_modular(parse_plan(legacy_plan)))

    assert modular.total_exercises == legacy.total_exercises
    assert modular.unique_muscle_groups == legacy.unique_muscle_groups
    assert modular.average_duration == legacy.average_duration == 53
    assert modular.total_modules == 6


def test_muscle_names_are_case_sensitive(legacy_plan: Dict[str, Any]) -> None:
    legacy_plan["workouts"][0]["exercises"][0]["primary_muscles"] = ["Chest", "chest", "triceps"]
    stats = compute_stats(parse_plan(legacy_plan))
    assert "Chest" in stats.muscle_groups
    assert stats.unique_muscle_groups == 10


def test_stats_to_dict(modular_plan: Dict[str, Any]) -> None:
    payload = compute_stats(parse_plan(modular_plan)).to_dict()
    assert payload["format"] == "modular"
    assert set(payload) == {
        "total_exercises",
        "total_modules",
        "average_duration",
        "unique_muscle_groups",
        "muscle_groups",
        "format",
    }
