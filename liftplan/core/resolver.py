"""Reconcile plan exercises against the authoritative exercise catalog."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from liftplan.core.models import (
    CatalogExercise,
    LegacyDay,
    WorkoutDay,
    WorkoutExercise,
    WorkoutPlan,
)

logger = logging.getLogger(__name__)

ResolutionStrategy = Callable[[WorkoutExercise, Sequence[CatalogExercise]], Optional[WorkoutExercise]]


def match_by_id(
    exercise: WorkoutExercise,
    catalog: Sequence[CatalogExercise],
) -> Optional[WorkoutExercise]:
    """Exact id match; the catalog's muscle list wins."""
    for entry in catalog:
        if entry.id == exercise.exercise_id:
            return replace(exercise, primary_muscles=list(entry.primary_muscles))
    return None


def match_by_name(
    exercise: WorkoutExercise,
    catalog: Sequence[CatalogExercise],
) -> Optional[WorkoutExercise]:
    """First catalog entry whose name contains the exercise name, case-insensitively."""
    needle = exercise.exercise_name.strip().lower()
    if not needle:
        return None
    for entry in catalog:
        if needle in entry.name.lower():
            return replace(
                exercise,
                exercise_id=entry.id,
                exercise_name=entry.name,
                primary_muscles=list(entry.primary_muscles),
            )
    return None


RESOLUTION_STRATEGIES: Tuple[ResolutionStrategy, ...] = (match_by_id, match_by_name)


def resolve_exercise(
    exercise: WorkoutExercise,
    catalog: Sequence[CatalogExercise],
    strategies: Sequence[ResolutionStrategy] = RESOLUTION_STRATEGIES,
) -> WorkoutExercise:
    for strategy in strategies:
        resolved = strategy(exercise, catalog)
        if resolved is not None:
            return resolved

    logger.warning(
        "Exercise %s (%r) not found in catalog; keeping original reference",
        exercise.exercise_id,
        exercise.exercise_name,
    )
    return exercise


def _resolve_list(exercises: List[WorkoutExercise], catalog: Sequence[CatalogExercise]) -> List[WorkoutExercise]:
    return [resolve_exercise(exercise, catalog) for exercise in exercises]


def _resolve_day(day: WorkoutDay, catalog: Sequence[CatalogExercise]) -> WorkoutDay:
    if isinstance(day, LegacyDay):
        return replace(day, exercises=_resolve_list(day.exercises, catalog))
    modules = [replace(module, exercises=_resolve_list(module.exercises, catalog)) for module in day.modules]
    return replace(day, modules=modules)


def resolve_exercises(plan: WorkoutPlan, catalog: Sequence[CatalogExercise]) -> WorkoutPlan:
    """Return a copy of the plan with every exercise reconciled where possible."""
    return replace(plan, workouts=[_resolve_day(day, catalog) for day in plan.workouts])
