"""One-repetition-maximum estimation from logged sets."""

from __future__ import annotations

from typing import Iterable, Optional

from liftplan.core.constants import CONFIDENCE_WEIGHTS
from liftplan.core.models import Confidence, OneRepMaxEstimate, PerformanceSet
from liftplan.utils.formatting import round_to_places


def calculate_epley(weight: float, reps: float) -> float:
    """Epley: weight x (1 + reps/30). Most accurate for 1-10 reps."""
    return weight * (1 + reps / 30)


def calculate_brzycki(weight: float, reps: float) -> float:
    """Brzycki: weight x 36/(37 - reps). Undefined from 37 reps; returns weight."""
    if reps >= 37:
        return weight
    return weight * (36 / (37 - reps))


def calculate_lander(weight: float, reps: float) -> float:
    """Lander: 100 x weight/(101.3 - 2.67123 x reps). Returns weight once the denominator hits 0."""
    denominator = 101.3 - 2.67123 * reps
    if denominator <= 0:
        return weight
    return (100 * weight) / denominator


def estimate_one_rep_max(performance_set: PerformanceSet) -> OneRepMaxEstimate:
    """Estimate 1RM, picking the formula by effective reps to failure.

    A set of 8 reps at 3 RIR counts as 11 reps to failure.
    """
    weight = performance_set.weight
    reps = performance_set.reps + (performance_set.rir or 0)

    if reps <= 5:
        estimate = calculate_epley(weight, reps)
        formula, confidence = "Epley", Confidence.HIGH
    elif reps <= 10:
        estimate = (calculate_epley(weight, reps) + calculate_brzycki(weight, reps)) / 2
        formula, confidence = "Epley + Brzycki Average", Confidence.HIGH
    elif reps <= 15:
        estimate = calculate_lander(weight, reps)
        formula, confidence = "Lander", Confidence.MEDIUM
    else:
        estimate = calculate_lander(weight, reps)
        formula, confidence = "Lander (High Rep)", Confidence.LOW

    return OneRepMaxEstimate(
        estimate=round_to_places(estimate, 2),
        formula=formula,
        confidence=confidence,
    )


def _score(result: OneRepMaxEstimate) -> float:
    return CONFIDENCE_WEIGHTS[result.confidence.value] * 1000 + result.estimate


def best_one_rep_max(sets: Iterable[PerformanceSet]) -> Optional[OneRepMaxEstimate]:
    """Best estimate across sets: confidence first, then magnitude."""
    estimates = [
        estimate_one_rep_max(performance_set)
        for performance_set in sets
        if performance_set.weight > 0 and performance_set.reps > 0
    ]
    if not estimates:
        return None
    return max(estimates, key=_score)
