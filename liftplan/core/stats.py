"""Summary metrics over plans in either format."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import reduce
from typing import Iterable, List, Set

from liftplan.core.models import LegacyDay, PlanStats, WorkoutDay, WorkoutExercise, WorkoutPlan


@dataclass(frozen=True)
class _Totals:
    exercises: int = 0
    modules: int = 0
    duration: float = 0.0
    muscles: Set[str] = field(default_factory=set)
    muscle_order: List[str] = field(default_factory=list)


def _day_exercises(day: WorkoutDay) -> Iterable[WorkoutExercise]:
    if isinstance(day, LegacyDay):
        return day.exercises
    return [exercise for module in day.modules for exercise in module.exercises]


def _accumulate(totals: _Totals, day: WorkoutDay) -> _Totals:
    exercises = list(_day_exercises(day))
    muscles = set(totals.muscles)
    order = list(totals.muscle_order)
    for exercise in exercises:
        for muscle in exercise.primary_muscles:
            if muscle not in muscles:
                muscles.add(muscle)
                order.append(muscle)

    return _Totals(
        exercises=totals.exercises + len(exercises),
        modules=totals.modules + (0 if isinstance(day, LegacyDay) else len(day.modules)),
        duration=totals.duration + (day.total_duration_minutes or 0),
        muscles=muscles,
        muscle_order=order,
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(plan: WorkoutPlan) -> PlanStats:
    totals = reduce(_accumulate, plan.workouts, _Totals())
    day_count = len(plan.workouts)
    return PlanStats(
        total_exercises=totals.exercises,
        total_modules=totals.modules,
        average_duration=_round_half_up(totals.duration / day_count) if day_count else 0,
        unique_muscle_groups=len(totals.muscles),
        muscle_groups=totals.muscle_order,
        format=plan.format,
    )
