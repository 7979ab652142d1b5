"""Static constants for plan formats and load prescription."""

from __future__ import annotations

MODULE_TYPES = ("warmup", "main", "core", "cooldown")
DIFFICULTY_TIERS = ("beginner", "intermediate", "advanced")

MODULAR_WORKOUT_TYPE = "modular"
FORMAT_VERSION = "2.0"

# Minutes per exercise, rest included.
MINUTES_PER_EXERCISE = 3.5

WARMUP_MODULE = {
    "type": "warmup",
    "name": "Warm-up",
    "description": "Prepare your body for the workout",
    "duration_minutes": 10,
    "order": 0,
}
MAIN_MODULE = {
    "type": "main",
    "name": "Main Workout",
    "description": "Primary training exercises",
    "order": 1,
}
COOLDOWN_MODULE = {
    "type": "cooldown",
    "name": "Cool-down",
    "description": "Stretching and recovery",
    "duration_minutes": 10,
    "order": 2,
}
CONVERTED_ENABLED_MODULES = ["warmup", "main", "cooldown"]

FALLBACK_EXERCISE_COUNT = 6
FALLBACK_PRESCRIPTION = {
    "sets": 3,
    "reps": "8-12",
    "rest": "60-90s",
    "suggested_weight": "Start light",
    "notes": "Focus on proper form",
}

CONFIDENCE_WEIGHTS = {"high": 3, "medium": 2, "low": 1}

# (max effective reps, fraction of 1RM); anything above the last bound gets 65%.
LOAD_PERCENTAGE_TABLE = [
    (3, 0.90),
    (5, 0.85),
    (8, 0.80),
    (12, 0.75),
    (15, 0.70),
]
HIGH_REP_PERCENTAGE = 0.65

DEFAULT_LOAD_SETTINGS = {
    "units": "kg",
    "rounding_increment": 2.5,
    "default_target_rir": 2,
    "heavy_threshold": 100,
    "large_step": 5,
    "small_step": 2.5,
}

# Used when a rep prescription carries no number at all (e.g. "AMRAP").
DEFAULT_TARGET_REPS = 10

MAX_RIR = 10

PROGRESSION_WINDOW = 3
MIN_SETS_FOR_TREND = 2
STRONG_SET_MAX_RIR = 1
STRUGGLE_REP_RATIO = 0.8
STRUGGLE_FAILURE_SETS = 2
DECREASE_FLOOR_RATIO = 0.9
