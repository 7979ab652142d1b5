"""Conversion between legacy (flat) and modular workout plans."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional, Sequence

from liftplan.core.constants import (
    CONVERTED_ENABLED_MODULES,
    COOLDOWN_MODULE,
    FALLBACK_EXERCISE_COUNT,
    FALLBACK_PRESCRIPTION,
    MAIN_MODULE,
    WARMUP_MODULE,
)
from liftplan.core.detect import detect_day_format
from liftplan.core.models import (
    CatalogExercise,
    ConversionResult,
    Difficulty,
    LegacyDay,
    ModularDay,
    ModuleType,
    PlanFormat,
    WorkoutExercise,
    WorkoutModule,
    WorkoutPlan,
)
from liftplan.core.schema import PlanFormatError, estimate_duration, parse_plan
from liftplan.core.validation import validate_modular

logger = logging.getLogger(__name__)


def _stub_module(template: dict, exercises: List[WorkoutExercise], duration: float) -> WorkoutModule:
    return WorkoutModule(
        type=ModuleType(template["type"]),
        name=template["name"],
        description=template["description"],
        duration_minutes=duration,
        exercises=exercises,
        order=template["order"],
    )


def legacy_day_to_modular(day: LegacyDay) -> ModularDay:
    """Wrap a flat exercise list into warmup/main/cooldown modules."""
    duration = day.total_duration_minutes
    if duration is None:
        duration = estimate_duration(len(day.exercises))

    modules = [
        _stub_module(WARMUP_MODULE, [], WARMUP_MODULE["duration_minutes"]),
        _stub_module(MAIN_MODULE, list(day.exercises), duration),
        _stub_module(COOLDOWN_MODULE, [], COOLDOWN_MODULE["duration_minutes"]),
    ]
    return ModularDay(
        day=day.day,
        name=day.name,
        description=day.description,
        total_duration_minutes=duration,
        modules=modules,
    )


def modular_day_to_legacy(day: ModularDay) -> LegacyDay:
    """Flatten modules by ascending order, tagging un-noted exercises with their module."""
    exercises: List[WorkoutExercise] = []
    for module in sorted(day.modules, key=lambda item: item.order):
        for exercise in module.exercises:
            if exercise.notes:
                exercises.append(exercise)
            else:
                exercises.append(replace(exercise, notes=f"{module.name} - {module.description}"))

    return LegacyDay(
        day=day.day,
        name=day.name,
        description=day.description,
        exercises=exercises,
        total_duration_minutes=day.total_duration_minutes,
    )


def _merged_enabled_modules(existing: Optional[Iterable[str]]) -> List[str]:
    """Existing enabled modules, followed by any converted-day modules they lack."""
    merged = list(existing or [])
    for module in CONVERTED_ENABLED_MODULES:
        if module not in merged:
            merged.append(module)
    return merged


def convert_to_modular(plan: WorkoutPlan) -> WorkoutPlan:
    """Convert legacy days; a plan with no legacy day comes back unchanged."""
    if not any(isinstance(day, LegacyDay) for day in plan.workouts):
        return plan

    workouts = [
        legacy_day_to_modular(day) if isinstance(day, LegacyDay) else day
        for day in plan.workouts
    ]
    existing = [module.value for module in plan.enabled_modules or []]
    return replace(
        plan,
        workouts=workouts,
        enabled_modules=[ModuleType(module) for module in _merged_enabled_modules(existing)],
    )


def _module_record(template: Dict[str, Any], exercises: List[Any], duration: float) -> Dict[str, Any]:
    return {
        "type": template["type"],
        "name": template["name"],
        "description": template["description"],
        "duration_minutes": duration,
        "exercises": exercises,
        "order": template["order"],
    }


def legacy_day_record_to_modular(day: Dict[str, Any]) -> Dict[str, Any]:
    """Record-level ``legacy_day_to_modular``: every other day key and every
    exercise dict is carried over as stored."""
    exercises = list(day.get("exercises") or [])
    duration = day.get("total_duration_minutes")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        duration = estimate_duration(len(exercises))

    payload = {key: value for key, value in day.items() if key != "exercises"}
    payload["total_duration_minutes"] = duration
    payload["modules"] = [
        _module_record(WARMUP_MODULE, [], WARMUP_MODULE["duration_minutes"]),
        _module_record(MAIN_MODULE, exercises, duration),
        _module_record(COOLDOWN_MODULE, [], COOLDOWN_MODULE["duration_minutes"]),
    ]
    return payload


def convert_record_to_modular(record: Dict[str, Any]) -> Dict[str, Any]:
    """Reshape a stored plan record without passing it through the typed model.

    Plan keys the model does not know about survive, as do unknown exercise
    keys and absent optional exercise fields.
    """
    days = list(record.get("workouts") or [])
    if not any(detect_day_format(day) is PlanFormat.LEGACY for day in days):
        return dict(record)

    workouts = [
        legacy_day_record_to_modular(day) if detect_day_format(day) is PlanFormat.LEGACY else day
        for day in days
    ]
    return {
        **record,
        "workouts": workouts,
        "enabled_modules": _merged_enabled_modules(record.get("enabled_modules")),
    }


def convert_to_legacy(plan: WorkoutPlan) -> WorkoutPlan:
    """Flatten every day. Module phases are lost; exercise data is kept."""
    workouts = [
        modular_day_to_legacy(day) if isinstance(day, ModularDay) else day
        for day in plan.workouts
    ]
    return replace(
        plan,
        workouts=workouts,
        enabled_modules=None,
        workout_type=None,
        format_version=None,
        migrated_at=None,
    )


def safe_convert_to_modular(record: Any) -> ConversionResult:
    """Validate, parse and convert a record; problems come back as strings."""
    try:
        plan = parse_plan(record)
    except PlanFormatError as exc:
        return ConversionResult(None, exc.errors)

    modular = convert_to_modular(plan)
    validation = validate_modular(modular.to_dict())
    if not validation.is_valid:
        logger.debug("Converted plan failed modular validation: %s", validation.errors)
        return ConversionResult(None, validation.errors)
    return ConversionResult(modular, [])


def create_fallback_plan(catalog: Sequence[CatalogExercise]) -> WorkoutPlan:
    """Basic one-day full body plan built from the head of the catalog."""
    if not catalog:
        raise ValueError("Cannot create fallback workout without exercise library")

    exercises = [
        WorkoutExercise(
            exercise_id=entry.id,
            exercise_name=entry.name,
            primary_muscles=list(entry.primary_muscles),
            **FALLBACK_PRESCRIPTION,
        )
        for entry in catalog[:FALLBACK_EXERCISE_COUNT]
    ]
    main = WorkoutModule(
        type=ModuleType.MAIN,
        name="Full Body Workout",
        description="Basic full body training session",
        duration_minutes=45,
        exercises=exercises,
        order=0,
    )
    day = ModularDay(
        day="Monday",
        name="Full Body Training",
        description="Complete body workout for all major muscle groups",
        total_duration_minutes=45,
        modules=[main],
    )
    return WorkoutPlan(
        name="Basic Training Program",
        description="A simple, effective training program for beginners",
        duration_weeks=4,
        days_per_week=3,
        difficulty=Difficulty.BEGINNER,
        goals=["Build Strength", "Learn Form"],
        workouts=[day],
        enabled_modules=[ModuleType.MAIN],
    )
