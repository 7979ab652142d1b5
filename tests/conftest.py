from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner


def _exercise(
    exercise_id: int,
    name: str,
    muscles: List[str],
    reps: Any = "8-12",
    notes: str | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "exercise_id": exercise_id,
        "exercise_name": name,
        "sets": 3,
        "reps": reps,
        "rest": "90s",
        "suggested_weight": "60kg",
        "primary_muscles": muscles,
    }
    if notes is not None:
        payload["notes"] = notes
    return payload


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def legacy_plan() -> Dict[str, Any]:
    return {
        "id": "plan-legacy",
        "name": "Upper / Lower",
        "description": "Four week strength block",
        "duration_weeks": 4,
        "days_per_week": 2,
        "difficulty": "intermediate",
        "goals": ["Build Strength"],
        "workouts": [
            {
                "day": "Monday",
                "name": "Upper",
                "description": "Push and pull",
                "total_duration_minutes": 45,
                "exercises": [
                    _exercise(2, "Bench Press", ["chest", "triceps"], reps=5, notes="Pause first rep"),
                    _exercise(5, "Barbell Row", ["lats", "rhomboids"]),
                    _exercise(7, "Overhead Press", ["shoulders", "triceps"], reps="6-8"),
                ],
            },
            {
                "day": "Thursday",
                "name": "Lower",
                "description": "Squat and hinge",
                "exercises": [
                    _exercise(1, "Back Squat", ["quadriceps", "glutes"], reps=5),
                    _exercise(3, "Romanian Deadlift", ["hamstrings", "glutes"]),
                    _exercise(8, "Walking Lunge", ["quadriceps"], reps="10-12"),
                    _exercise(9, "Plank", ["core"], reps="30s hold"),
                ],
            },
        ],
    }


@pytest.fixture()
def modular_plan() -> Dict[str, Any]:
    return {
        "id": "plan-modular",
        "name": "Full Body",
        "description": "Three phase sessions",
        "duration_weeks": 6,
        "days_per_week": 1,
        "difficulty": "beginner",
        "goals": ["General Fitness"],
        "enabled_modules": ["warmup", "main", "cooldown"],
        "workouts": [
            {
                "day": "Tuesday",
                "name": "Full Body A",
                "description": "Whole body session",
                "total_duration_minutes": 50,
                "modules": [
                    {
                        "type": "main",
                        "name": "Strength",
                        "description": "Compound lifts",
                        "duration_minutes": 30,
                        "order": 1,
                        "exercises": [
                            _exercise(1, "Back Squat", ["quadriceps", "glutes"], reps=5),
                            _exercise(2, "Bench Press", ["chest", "triceps"], reps=5, notes="Touch and go"),
                        ],
                    },
                    {
                        "type": "warmup",
                        "name": "Warm-up",
                        "description": "Raise temperature",
                        "duration_minutes": 10,
                        "order": 0,
                        "exercises": [_exercise(20, "Jumping Jacks", ["full body"], reps=30)],
                    },
                    {
                        "type": "cooldown",
                        "name": "Cool-down",
                        "description": "Stretching",
                        "duration_minutes": 10,
                        "order": 2,
                        "exercises": [],
                    },
                ],
            }
        ],
    }


@pytest.fixture()
def catalog_records() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "name": "Barbell Back Squat", "primary_muscles": ["quadriceps", "glutes"]},
        {"id": 2, "name": "Bench Press", "primary_muscles": ["chest", "triceps", "shoulders"]},
        {"id": 3, "name": "Romanian Deadlift", "primary_muscles": ["hamstrings"]},
        {"id": 4, "name": "Seated Cable Row", "primary_muscles": ["lats"]},
        {"id": 5, "name": "Pull-up", "primary_muscles": ["lats", "biceps"]},
        {"id": 6, "name": "Dumbbell Shoulder Press", "primary_muscles": ["shoulders"]},
        {"id": 7, "name": "Leg Press", "primary_muscles": ["quadriceps"]},
        {"id": 8, "name": "Cable Crunch", "primary_muscles": ["core"]},
    ]


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
