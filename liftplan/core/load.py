"""Working-weight suggestions and load progression."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Optional, Sequence

from liftplan.core.constants import (
    DECREASE_FLOOR_RATIO,
    DEFAULT_LOAD_SETTINGS,
    DEFAULT_TARGET_REPS,
    HIGH_REP_PERCENTAGE,
    LOAD_PERCENTAGE_TABLE,
    MIN_SETS_FOR_TREND,
    PROGRESSION_WINDOW,
    STRONG_SET_MAX_RIR,
    STRUGGLE_FAILURE_SETS,
    STRUGGLE_REP_RATIO,
)
from liftplan.core.models import PerformanceSet, ProgressionSuggestion, Reps
from liftplan.utils.formatting import format_weight, round_to_increment

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r"(\d+)\s*[-–]\s*(\d+)")
_SINGLE_RE = re.compile(r"(\d+)")


def parse_target_reps(value: Reps) -> int:
    """Parse a rep prescription: 10, "10" or the rounded midpoint of "8-12"."""
    if isinstance(value, bool):
        raise TypeError("target reps must be an int or a string")
    if isinstance(value, (int, float)):
        return int(value)

    text = str(value)
    match = _RANGE_RE.search(text)
    if match:
        low, high = int(match.group(1)), int(match.group(2))
        return int(math.floor((low + high) / 2 + 0.5))

    match = _SINGLE_RE.search(text)
    if match:
        return int(match.group(1))

    logger.warning("Unrecognized rep prescription %r; assuming %d reps", text, DEFAULT_TARGET_REPS)
    return DEFAULT_TARGET_REPS


def load_percentage(effective_reps: float) -> float:
    """Fraction of 1RM for a number of reps to failure."""
    for max_reps, percentage in LOAD_PERCENTAGE_TABLE:
        if effective_reps <= max_reps:
            return percentage
    return HIGH_REP_PERCENTAGE


def suggest_weight(
    one_rm: float,
    target_reps: Reps,
    target_rir: int = DEFAULT_LOAD_SETTINGS["default_target_rir"],
    increment: float = DEFAULT_LOAD_SETTINGS["rounding_increment"],
) -> float:
    """Working weight for a rep target, rounded to the plate increment."""
    effective_reps = parse_target_reps(target_reps) + target_rir
    return round_to_increment(one_rm * load_percentage(effective_reps), increment)


def suggest_progression(
    recent_sets: Sequence[PerformanceSet],
    current_suggestion: float,
    target_reps: Reps,
    settings: Optional[Dict[str, Any]] = None,
) -> ProgressionSuggestion:
    """Adjust a suggestion from the trend of the most recent logged sets.

    Missing RIR counts as 0 (taken to failure).
    """
    cfg = {**DEFAULT_LOAD_SETTINGS, **(settings or {})}
    if len(recent_sets) < MIN_SETS_FOR_TREND:
        return ProgressionSuggestion(current_suggestion, "Baseline suggestion")

    reps_target = parse_target_reps(target_reps)
    window = list(recent_sets)[-PROGRESSION_WINDOW:]
    step = cfg["large_step"] if current_suggestion >= cfg["heavy_threshold"] else cfg["small_step"]
    units = str(cfg["units"])

    if all(item.reps >= reps_target and (item.rir or 0) <= STRONG_SET_MAX_RIR for item in window):
        return ProgressionSuggestion(
            current_suggestion + step,
            f"Progressed +{format_weight(step, units)} - consistent performance",
        )

    missed_reps = any(item.reps < reps_target * STRUGGLE_REP_RATIO for item in window)
    failures = sum(1 for item in window if (item.rir or 0) == 0)
    if missed_reps or failures >= STRUGGLE_FAILURE_SETS:
        return ProgressionSuggestion(
            max(current_suggestion - step, current_suggestion * DECREASE_FLOOR_RATIO),
            f"Reduced -{format_weight(step, units)} - allow recovery",
        )

    return ProgressionSuggestion(current_suggestion, "Maintain current weight")
