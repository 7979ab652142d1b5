"""Translate untyped plan records into typed models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from liftplan.core.constants import MAX_RIR, MINUTES_PER_EXERCISE, MODULE_TYPES
from liftplan.core.detect import detect_day_format
from liftplan.core.models import (
    CatalogExercise,
    Difficulty,
    LegacyDay,
    ModularDay,
    ModuleType,
    PerformanceSet,
    PlanFormat,
    WorkoutDay,
    WorkoutExercise,
    WorkoutModule,
    WorkoutPlan,
)
from liftplan.core.validation import validate_plan


class PlanFormatError(ValueError):
    """Raised when a record cannot be read as a workout plan."""

    def __init__(self, errors: List[str]) -> None:
        super().__init__("; ".join(errors) or "Invalid workout plan")
        self.errors = list(errors)


def estimate_duration(exercise_count: int) -> float:
    """Planned minutes for a number of exercises, rest included."""
    if exercise_count <= 0:
        return 0
    return exercise_count * MINUTES_PER_EXERCISE


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _as_rir(value: Any) -> Optional[int]:
    number = _as_number(value)
    if number is None or (isinstance(number, float) and not number.is_integer()):
        return None
    if not 0 <= number <= MAX_RIR:
        return None
    return int(number)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _muscles(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def exercise_from_record(record: Dict[str, Any]) -> WorkoutExercise:
    return WorkoutExercise(
        exercise_id=_as_int(record.get("exercise_id")),
        exercise_name=str(record.get("exercise_name") or ""),
        sets=_as_int(record.get("sets"), default=1),
        reps=record.get("reps"),
        rest=str(record.get("rest") or ""),
        suggested_weight=_optional_text(record.get("suggested_weight")),
        notes=_optional_text(record.get("notes")),
        primary_muscles=_muscles(record.get("primary_muscles")),
    )


def _exercises(records: Any) -> List[WorkoutExercise]:
    if not isinstance(records, list):
        return []
    return [exercise_from_record(item) for item in records if isinstance(item, dict)]


def module_from_record(record: Dict[str, Any], index: int = 0) -> WorkoutModule:
    exercises = _exercises(record.get("exercises"))
    duration = _as_number(record.get("duration_minutes"))
    return WorkoutModule(
        type=ModuleType(record.get("type")),
        name=str(record.get("name") or ""),
        description=str(record.get("description") or ""),
        duration_minutes=duration if duration is not None else estimate_duration(len(exercises)),
        exercises=exercises,
        order=_as_int(record.get("order"), default=index),
    )


def day_from_record(record: Dict[str, Any]) -> WorkoutDay:
    """Build the tagged day variant for a record."""
    day_format = detect_day_format(record)
    duration = _as_number(record.get("total_duration_minutes"))

    if day_format is PlanFormat.MODULAR:
        modules = [
            module_from_record(module, index)
            for index, module in enumerate(record["modules"])
            if isinstance(module, dict)
        ]
        if duration is None:
            duration = estimate_duration(sum(len(module.exercises) for module in modules))
        return ModularDay(
            day=str(record.get("day") or ""),
            name=str(record.get("name") or ""),
            description=str(record.get("description") or ""),
            total_duration_minutes=duration,
            modules=modules,
        )

    if day_format is PlanFormat.LEGACY:
        return LegacyDay(
            day=str(record.get("day") or ""),
            name=str(record.get("name") or ""),
            description=str(record.get("description") or ""),
            exercises=_exercises(record["exercises"]),
            total_duration_minutes=duration,
        )

    raise PlanFormatError([f"Day {record.get('day') or '?'}: must contain either modules or exercises"])


def parse_plan(record: Any) -> WorkoutPlan:
    """Validate a plan record and return its typed form."""
    result = validate_plan(record)
    if not result.is_valid:
        raise PlanFormatError(result.errors)

    enabled = record.get("enabled_modules")
    enabled_modules = None
    if isinstance(enabled, list):
        enabled_modules = [ModuleType(item) for item in enabled if item in MODULE_TYPES]

    goals = record.get("goals")
    workouts = [day_from_record(day) for day in record["workouts"]]
    return WorkoutPlan(
        name=record["name"],
        description=record["description"],
        duration_weeks=_as_int(record.get("duration_weeks")),
        days_per_week=_as_int(record.get("days_per_week"), default=len(workouts)),
        difficulty=Difficulty(record.get("difficulty") or Difficulty.BEGINNER.value),
        goals=[str(goal) for goal in goals] if isinstance(goals, list) else [],
        workouts=workouts,
        enabled_modules=enabled_modules,
        id=_optional_text(record.get("id")),
        workout_type=_optional_text(record.get("workout_type")),
        format_version=_optional_text(record.get("format_version")),
        migrated_at=_optional_text(record.get("migrated_at")),
    )


def catalog_from_records(records: Any) -> List[CatalogExercise]:
    """Read catalog entries, skipping rows without an id or name."""
    if isinstance(records, dict):
        records = records.get("exercises")
    if not isinstance(records, list):
        return []

    catalog: List[CatalogExercise] = []
    for item in records:
        if not isinstance(item, dict) or item.get("id") is None or not item.get("name"):
            continue
        catalog.append(
            CatalogExercise(
                id=_as_int(item["id"]),
                name=str(item["name"]),
                primary_muscles=_muscles(item.get("primary_muscles")),
            )
        )
    return catalog


def performance_sets_from_records(records: Any) -> List[PerformanceSet]:
    """Read logged sets.

    Rows without numeric weight and reps are skipped, as are rows whose rir is
    present but not a whole number between 0 and MAX_RIR.
    """
    if isinstance(records, dict):
        records = records.get("sets")
    if not isinstance(records, list):
        return []

    sets: List[PerformanceSet] = []
    for item in records:
        if not isinstance(item, dict):
            continue
        weight = _as_number(item.get("weight"))
        reps = _as_number(item.get("reps"))
        if weight is None or reps is None:
            continue
        rir = item.get("rir")
        if rir is not None:
            rir = _as_rir(rir)
            if rir is None:
                continue
        sets.append(PerformanceSet(weight=weight, reps=int(reps), rir=rir))
    return sets
