"""Structural validation for workout plan records.

Validators never raise on malformed input: every defect becomes one error
string so callers can report all problems at once.
"""

from __future__ import annotations

from typing import Any, List

from liftplan.core.constants import DIFFICULTY_TIERS, MODULE_TYPES
from liftplan.core.detect import detect_format
from liftplan.core.models import PlanFormat, ValidationResult


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_exercise(exercise: Any, prefix: str) -> List[str]:
    if not isinstance(exercise, dict):
        return [f"{prefix}: exercise must be an object"]

    errors: List[str] = []
    if not _is_text(exercise.get("exercise_name")):
        errors.append(f"{prefix}: exercise name is required")

    sets = exercise.get("sets")
    if not _is_int(sets) or sets < 1:
        errors.append(f"{prefix}: sets must be an integer of at least 1")

    reps = exercise.get("reps")
    if not ((_is_int(reps) and reps >= 1) or _is_text(reps)):
        errors.append(f"{prefix}: reps must be a positive integer or a rep range")
    return errors


def _validate_exercise_list(exercises: List[Any], prefix: str) -> List[str]:
    errors: List[str] = []
    for index, exercise in enumerate(exercises, start=1):
        errors.extend(_validate_exercise(exercise, f"{prefix}, Exercise {index}"))
    return errors


def _validate_day(day: Any, day_number: int) -> List[str]:
    prefix = f"Day {day_number}"
    if not isinstance(day, dict):
        return [f"{prefix}: must be an object"]

    errors: List[str] = []
    if not _is_text(day.get("day")):
        errors.append(f"{prefix}: day name is required")
    if not _is_text(day.get("name")):
        errors.append(f"{prefix}: workout name is required")

    if "modules" in day:
        modules = day["modules"]
        if not isinstance(modules, list):
            errors.append(f"{prefix}: modules must be a list")
            return errors
        for module_number, module in enumerate(modules, start=1):
            module_prefix = f"{prefix}, Module {module_number}"
            if not isinstance(module, dict):
                errors.append(f"{module_prefix}: module must be an object")
                continue
            if module.get("type") not in MODULE_TYPES:
                errors.append(f"{module_prefix}: invalid module type")
            exercises = module.get("exercises")
            if not isinstance(exercises, list):
                errors.append(f"{module_prefix}: exercises must be a list")
                continue
            errors.extend(_validate_exercise_list(exercises, module_prefix))
    elif "exercises" in day:
        exercises = day["exercises"]
        if not isinstance(exercises, list):
            errors.append(f"{prefix}: exercises must be a list")
            return errors
        errors.extend(_validate_exercise_list(exercises, prefix))
    else:
        errors.append(f"{prefix}: must contain either modules or exercises")

    return errors


def validate_plan(record: Any) -> ValidationResult:
    """Check format-independent structure of a plan record."""
    if record is None:
        return ValidationResult(False, ["Workout data is null or undefined"])
    if not isinstance(record, dict):
        return ValidationResult(False, ["Workout data must be an object"])

    errors: List[str] = []
    if not _is_text(record.get("name")):
        errors.append("Workout name is required and must be a string")
    if not _is_text(record.get("description")):
        errors.append("Workout description is required and must be a string")
    if "difficulty" in record and record["difficulty"] not in DIFFICULTY_TIERS:
        errors.append(f"Workout difficulty must be one of: {', '.join(DIFFICULTY_TIERS)}")

    workouts = record.get("workouts")
    if not isinstance(workouts, list):
        errors.append("Workout must contain a workouts list")
        return ValidationResult(False, errors)
    if not workouts:
        errors.append("Workout must contain at least one workout day")

    for day_number, day in enumerate(workouts, start=1):
        errors.extend(_validate_day(day, day_number))

    return ValidationResult(not errors, errors)


def validate_modular(record: Any) -> ValidationResult:
    """Check the rules specific to the modular format."""
    if not isinstance(record, dict):
        return ValidationResult(False, ["Workout data must be an object"])

    errors: List[str] = []
    enabled = record.get("enabled_modules")
    if not isinstance(enabled, list):
        errors.append("Modular workout must have enabled_modules list")
    elif any(module not in MODULE_TYPES for module in enabled):
        errors.append("enabled_modules contains an invalid module type")

    workouts = record.get("workouts")
    if not isinstance(workouts, list):
        errors.append("Workout must contain a workouts list")
        return ValidationResult(False, errors)

    for day_number, day in enumerate(workouts, start=1):
        prefix = f"Day {day_number}"
        modules = day.get("modules") if isinstance(day, dict) else None
        if not isinstance(modules, list):
            errors.append(f"{prefix}: must contain modules list in modular format")
            continue
        modules = [module for module in modules if isinstance(module, dict)]

        orders = [module.get("order") for module in modules]
        if not all(_is_int(order) for order in orders):
            errors.append(f"{prefix}: module orders must be integers")
        elif sorted(orders) != list(range(len(orders))):
            errors.append(f"{prefix}: module orders must be sequential starting from 0")

        mains = [module for module in modules if module.get("type") == "main"]
        if len(mains) > 1:
            errors.append(f"{prefix}: must contain exactly one main module")
        elif not mains or not mains[0].get("exercises"):
            errors.append(f"{prefix}: must contain a main module with exercises")

    return ValidationResult(not errors, errors)


def validate(record: Any) -> ValidationResult:
    """Run base validation plus the modular pass for modular records."""
    result = validate_plan(record)
    if detect_format(record) is not PlanFormat.MODULAR:
        return result

    modular = validate_modular(record)
    errors = result.errors + modular.errors
    return ValidationResult(not errors, errors)
