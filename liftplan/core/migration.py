"""Stored-plan lifecycle: guarded save, advisory load, legacy migration."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from liftplan.core.constants import FORMAT_VERSION, MODULAR_WORKOUT_TYPE
from liftplan.core.convert import convert_record_to_modular, safe_convert_to_modular
from liftplan.core.detect import detect_format, is_modular
from liftplan.core.models import LoadResult, MigrationResult, PlanFormat, SaveResult
from liftplan.core.storage import ConflictError, PlanNotFoundError, PlanStore, StoreError
from liftplan.core.validation import validate

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MigrationService:
    """Moves stored plans from legacy to modular format, one plan at a time."""

    def __init__(self, store: PlanStore, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.store = store
        self.clock = clock or _utc_now

    def save_plan(self, record: Any) -> SaveResult:
        """Persist a new plan; refused when validation fails."""
        validation = validate(record)
        if not validation.is_valid:
            return SaveResult(success=False, errors=validation.errors)

        payload: Dict[str, Any] = dict(record)
        if detect_format(payload) is PlanFormat.MODULAR:
            payload["workout_type"] = MODULAR_WORKOUT_TYPE
            payload["format_version"] = FORMAT_VERSION

        try:
            plan_id = self.store.create(payload)
        except StoreError as exc:
            return SaveResult(success=False, errors=[f"Failed to save plan: {exc}"])
        logger.debug("Saved plan %s", plan_id)
        return SaveResult(success=True, plan_id=plan_id)

    def load_plan(self, plan_id: str) -> LoadResult:
        """Load a plan; validation problems are reported but do not block."""
        try:
            stored = self.store.load(plan_id)
        except PlanNotFoundError:
            return LoadResult(record=None, errors=[f"Plan {plan_id} not found"])
        except StoreError as exc:
            return LoadResult(record=None, errors=[f"Failed to load plan {plan_id}: {exc}"])

        record = stored.record
        plan_format = PlanFormat.MODULAR if is_modular(record) else detect_format(record)
        validation = validate(record)
        if not validation.is_valid:
            logger.warning("Plan %s failed validation: %s", plan_id, "; ".join(validation.errors))
        return LoadResult(record=record, plan_format=plan_format, errors=validation.errors)

    def migrate(self, plan_id: str) -> MigrationResult:
        """Convert a stored legacy plan to modular format in place.

        Already-modular plans are left untouched. The write is guarded by the
        revision read at load time.
        """
        try:
            stored = self.store.load(plan_id)
        except PlanNotFoundError:
            return MigrationResult(success=False, errors=[f"Plan {plan_id} not found"])
        except StoreError as exc:
            return MigrationResult(success=False, errors=[f"Failed to load plan {plan_id}: {exc}"])

        if is_modular(stored.record):
            logger.debug("Plan %s is already modular", plan_id)
            return MigrationResult(success=True)

        if detect_format(stored.record) is PlanFormat.UNKNOWN:
            return MigrationResult(
                success=False,
                errors=[f"Plan {plan_id} is neither legacy nor modular"],
            )

        conversion = safe_convert_to_modular(stored.record)
        if conversion.plan is None:
            return MigrationResult(success=False, errors=list(conversion.errors))

        payload = convert_record_to_modular(stored.record)
        payload.update(
            {
                "workout_type": MODULAR_WORKOUT_TYPE,
                "format_version": FORMAT_VERSION,
                "migrated_at": self.clock().isoformat(),
            }
        )

        try:
            self.store.save(plan_id, payload, expected_revision=stored.revision)
        except ConflictError as exc:
            return self._resolve_conflict(plan_id, exc)
        except StoreError as exc:
            return MigrationResult(success=False, errors=[f"Migration failed: {exc}"])

        logger.info("Migrated plan %s to modular format", plan_id)
        return MigrationResult(success=True, migrated=True)

    def _resolve_conflict(self, plan_id: str, conflict: ConflictError) -> MigrationResult:
        logger.warning("Concurrent write detected while migrating plan %s", plan_id)
        try:
            current = self.store.load(plan_id)
        except StoreError as exc:
            return MigrationResult(success=False, errors=[f"Migration failed: {conflict}", str(exc)])

        if is_modular(current.record):
            return MigrationResult(success=True)
        return MigrationResult(success=False, errors=[f"Migration failed: {conflict}"])

    def migrate_many(self, plan_ids: List[str]) -> Dict[str, MigrationResult]:
        return {plan_id: self.migrate(plan_id) for plan_id in plan_ids}
