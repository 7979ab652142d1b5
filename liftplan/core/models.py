"""Data models for workout plans, performance logs and derived results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ModuleType(str, Enum):
    WARMUP = "warmup"
    MAIN = "main"
    CORE = "core"
    COOLDOWN = "cooldown"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class PlanFormat(str, Enum):
    LEGACY = "legacy"
    MODULAR = "modular"
    UNKNOWN = "unknown"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


Reps = Union[int, str]


@dataclass(frozen=True)
class CatalogExercise:
    """Authoritative exercise library entry."""

    id: int
    name: str
    primary_muscles: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "primary_muscles": list(self.primary_muscles)}


@dataclass(frozen=True)
class WorkoutExercise:
    """A prescribed exercise referencing a catalog entry."""

    exercise_id: int
    exercise_name: str
    sets: int
    reps: Reps
    rest: str
    suggested_weight: Optional[str] = None
    notes: Optional[str] = None
    primary_muscles: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "exercise_id": self.exercise_id,
            "exercise_name": self.exercise_name,
            "sets": self.sets,
            "reps": self.reps,
            "rest": self.rest,
        }
        if self.suggested_weight is not None:
            payload["suggested_weight"] = self.suggested_weight
        if self.notes is not None:
            payload["notes"] = self.notes
        payload["primary_muscles"] = list(self.primary_muscles)
        return payload


@dataclass(frozen=True)
class WorkoutModule:
    """One typed phase of a modular training day."""

    type: ModuleType
    name: str
    description: str
    duration_minutes: float
    exercises: List[WorkoutExercise]
    order: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "duration_minutes": self.duration_minutes,
            "exercises": [exercise.to_dict() for exercise in self.exercises],
            "order": self.order,
        }


@dataclass(frozen=True)
class LegacyDay:
    """Training day as a flat exercise list."""

    day: str
    name: str
    description: str
    exercises: List[WorkoutExercise]
    total_duration_minutes: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "day": self.day,
            "name": self.name,
            "description": self.description,
        }
        if self.total_duration_minutes is not None:
            payload["total_duration_minutes"] = self.total_duration_minutes
        payload["exercises"] = [exercise.to_dict() for exercise in self.exercises]
        return payload


@dataclass(frozen=True)
class ModularDay:
    """Training day as an ordered sequence of modules."""

    day: str
    name: str
    description: str
    total_duration_minutes: float
    modules: List[WorkoutModule]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "name": self.name,
            "description": self.description,
            "total_duration_minutes": self.total_duration_minutes,
            "modules": [module.to_dict() for module in self.modules],
        }


WorkoutDay = Union[LegacyDay, ModularDay]


@dataclass(frozen=True)
class WorkoutPlan:
    """Top-level plan in either wire format."""

    name: str
    description: str
    duration_weeks: int
    days_per_week: int
    difficulty: Difficulty
    goals: List[str]
    workouts: List[WorkoutDay]
    enabled_modules: Optional[List[ModuleType]] = None
    id: Optional[str] = None
    workout_type: Optional[str] = None
    format_version: Optional[str] = None
    migrated_at: Optional[str] = None

    @property
    def format(self) -> PlanFormat:
        if self.workouts and all(isinstance(day, ModularDay) for day in self.workouts):
            return PlanFormat.MODULAR
        if self.workouts:
            return PlanFormat.LEGACY
        return PlanFormat.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.id is not None:
            payload["id"] = self.id
        payload.update(
            {
                "name": self.name,
                "description": self.description,
                "duration_weeks": self.duration_weeks,
                "days_per_week": self.days_per_week,
                "difficulty": self.difficulty.value,
                "goals": list(self.goals),
                "workouts": [day.to_dict() for day in self.workouts],
            }
        )
        if self.enabled_modules is not None:
            payload["enabled_modules"] = [module.value for module in self.enabled_modules]
        for key in ("workout_type", "format_version", "migrated_at"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload


@dataclass(frozen=True)
class PerformanceSet:
    """A logged set: weight, reps and optional reps-in-reserve."""

    weight: float
    reps: int
    rir: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"weight": self.weight, "reps": self.reps}
        if self.rir is not None:
            payload["rir"] = self.rir
        return payload


@dataclass(frozen=True)
class OneRepMaxEstimate:
    estimate: float
    formula: str
    confidence: Confidence

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimate": self.estimate,
            "formula": self.formula,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class ProgressionSuggestion:
    weight: float
    note: str

    def to_dict(self) -> Dict[str, Any]:
        return {"weight": self.weight, "note": self.note}


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": list(self.errors)}


@dataclass(frozen=True)
class ConversionResult:
    plan: Optional[WorkoutPlan]
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PlanStats:
    """Summary metrics over a plan in either format."""

    total_exercises: int
    total_modules: int
    average_duration: int
    unique_muscle_groups: int
    muscle_groups: List[str]
    format: PlanFormat

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_exercises": self.total_exercises,
            "total_modules": self.total_modules,
            "average_duration": self.average_duration,
            "unique_muscle_groups": self.unique_muscle_groups,
            "muscle_groups": list(self.muscle_groups),
            "format": self.format.value,
        }


@dataclass(frozen=True)
class MigrationResult:
    success: bool
    errors: List[str] = field(default_factory=list)
    migrated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "errors": list(self.errors), "migrated": self.migrated}


@dataclass(frozen=True)
class SaveResult:
    success: bool
    plan_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "plan_id": self.plan_id, "errors": list(self.errors)}


@dataclass(frozen=True)
class LoadResult:
    record: Optional[Dict[str, Any]]
    plan_format: PlanFormat = PlanFormat.UNKNOWN
    errors: List[str] = field(default_factory=list)
