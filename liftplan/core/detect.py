"""Plan format detection from untyped records."""

from __future__ import annotations

from typing import Any

from liftplan.core.constants import MODULAR_WORKOUT_TYPE
from liftplan.core.models import PlanFormat


def detect_day_format(record: Any) -> PlanFormat:
    """Classify one day record by which exercise container it exposes."""
    if not isinstance(record, dict):
        return PlanFormat.UNKNOWN
    if isinstance(record.get("modules"), list):
        return PlanFormat.MODULAR
    if "modules" not in record and isinstance(record.get("exercises"), list):
        return PlanFormat.LEGACY
    return PlanFormat.UNKNOWN


def detect_format(record: Any) -> PlanFormat:
    """Classify a plan, or a bare day, as legacy or modular.

    A plan is modular only when every day is modular. Any day that cannot be
    classified makes the whole plan unknown; otherwise the plan still carries at
    least one legacy day and is reported as legacy.
    """
    if not isinstance(record, dict):
        return PlanFormat.UNKNOWN

    workouts = record.get("workouts")
    if workouts is None:
        return detect_day_format(record)
    if not isinstance(workouts, list) or not workouts:
        return PlanFormat.UNKNOWN

    formats = {detect_day_format(day) for day in workouts}
    if PlanFormat.UNKNOWN in formats:
        return PlanFormat.UNKNOWN
    if formats == {PlanFormat.MODULAR}:
        return PlanFormat.MODULAR
    return PlanFormat.LEGACY


def is_modular(record: Any) -> bool:
    """True for records flagged or shaped as modular."""
    if isinstance(record, dict) and record.get("workout_type") == MODULAR_WORKOUT_TYPE:
        return True
    return detect_format(record) is PlanFormat.MODULAR
