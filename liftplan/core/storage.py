"""Persistent plan stores with revision-guarded writes.

Every stored plan carries an integer revision. ``save`` with an
``expected_revision`` only succeeds when the stored revision still matches,
so concurrent writers cannot silently overwrite each other.
"""

from __future__ import annotations

import contextlib
import fcntl
import json
import os
import tempfile
import threading
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Protocol

import requests

from liftplan.core.config import resolve_store_dir


class StoreError(RuntimeError):
    """Raised when the plan store cannot be read or written."""


class PlanNotFoundError(StoreError):
    """Raised when no plan exists for an id."""


class ConflictError(StoreError):
    """Raised when a guarded write finds a newer revision."""


@dataclass(frozen=True)
class StoredPlan:
    plan_id: str
    record: Dict[str, Any]
    revision: int


class PlanStore(Protocol):
    def load(self, plan_id: str) -> StoredPlan: ...

    def save(self, plan_id: str, record: Dict[str, Any], expected_revision: Optional[int] = None) -> int: ...

    def create(self, record: Dict[str, Any]) -> str: ...


class FilePlanStore:
    """One JSON document per plan under a directory.

    Guarded writes hold an exclusive ``flock`` on a sidecar ``.lock`` file for
    the whole read-compare-write, so competing processes serialize too.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._thread_lock = threading.RLock()

    def _path(self, plan_id: str) -> Path:
        safe = "".join(ch for ch in str(plan_id) if ch.isalnum() or ch in "-_")
        if not safe:
            raise PlanNotFoundError(f"Invalid plan id: {plan_id!r}")
        return self.directory / f"{safe}.json"

    @contextlib.contextmanager
    def _locked(self, path: Path) -> Iterator[None]:
        with self._thread_lock:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
                handle = open(path.with_suffix(".lock"), "w")
            except OSError as exc:
                raise StoreError(f"Failed to lock {path}: {exc}") from exc
            with handle:
                fcntl.flock(handle, fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    fcntl.flock(handle, fcntl.LOCK_UN)

    def _read(self, path: Path) -> Dict[str, Any]:
        try:
            payload = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt plan document {path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Failed to read {path}: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("plan"), dict):
            raise StoreError(f"Plan document {path} is missing its plan object")
        return payload

    def _write(self, path: Path, payload: Dict[str, Any]) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
            with os.fdopen(fd, "w") as handle:
                handle.write(json.dumps(payload, indent=2) + "\n")
            os.replace(tmp_name, path)
        except OSError as exc:
            raise StoreError(f"Failed to write {path}: {exc}") from exc

    def _save_locked(self, path: Path, plan_id: str, record: Dict[str, Any], expected_revision: Optional[int]) -> int:
        current = int(self._read(path).get("revision", 0)) if path.exists() else 0
        if expected_revision is not None and current != expected_revision:
            raise ConflictError(
                f"Plan {plan_id} changed (revision {current}, expected {expected_revision})"
            )
        revision = current + 1
        self._write(path, {"revision": revision, "plan": record})
        return revision

    def load(self, plan_id: str) -> StoredPlan:
        path = self._path(plan_id)
        if not path.exists():
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        payload = self._read(path)
        return StoredPlan(plan_id=str(plan_id), record=payload["plan"], revision=int(payload.get("revision", 0)))

    def save(self, plan_id: str, record: Dict[str, Any], expected_revision: Optional[int] = None) -> int:
        path = self._path(plan_id)
        with self._locked(path):
            return self._save_locked(path, plan_id, record, expected_revision)

    def create(self, record: Dict[str, Any]) -> str:
        plan_id = str(record.get("id") or uuid.uuid4())
        path = self._path(plan_id)
        with self._locked(path):
            if path.exists():
                raise ConflictError(f"Plan {plan_id} already exists")
            self._save_locked(path, plan_id, {**record, "id": plan_id}, None)
        return plan_id


class RestPlanStore:
    """PostgREST-style HTTP store with retry and rate limiting.

    Rows look like ``{"id": ..., "json_plan": {...}, "revision": n}``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        table: str = "workout_plans",
        rate_limit_delay: float = 0.0,
        max_retries: int = 3,
        timeout_seconds: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.rate_limit_delay = rate_limit_delay
        self.max_retries = max_retries
        self.timeout_seconds = timeout_seconds
        self._has_sent_request = False

    @property
    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(
        self,
        method: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.base_url}/{self.table}"
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                if self.rate_limit_delay > 0 and self._has_sent_request:
                    time.sleep(self.rate_limit_delay)

                self._has_sent_request = True
                response = requests.request(
                    method=method,
                    url=url,
                    headers=self._headers,
                    params=params,
                    json=json_data,
                    timeout=self.timeout_seconds,
                )
                if response.status_code in (429, 500, 502, 503, 504):
                    raise requests.HTTPError(response.text, response=response)
                response.raise_for_status()

                if not response.text:
                    return []
                return response.json()
            except (requests.RequestException, ValueError) as exc:
                last_error = exc
                if attempt >= self.max_retries:
                    break
                time.sleep(min(2**attempt, 8))

        raise StoreError(f"Store request failed for {method} {self.table}: {last_error}")

    @staticmethod
    def _row_to_plan(row: Any, plan_id: str) -> StoredPlan:
        if not isinstance(row, dict) or not isinstance(row.get("json_plan"), dict):
            raise StoreError(f"Plan {plan_id} row has no json_plan object")
        return StoredPlan(plan_id=str(row.get("id", plan_id)), record=row["json_plan"], revision=int(row.get("revision") or 0))

    def load(self, plan_id: str) -> StoredPlan:
        rows = self._request("GET", params={"id": f"eq.{plan_id}", "select": "id,json_plan,revision"})
        if not rows:
            raise PlanNotFoundError(f"Plan {plan_id} not found")
        return self._row_to_plan(rows[0], plan_id)

    def save(self, plan_id: str, record: Dict[str, Any], expected_revision: Optional[int] = None) -> int:
        params = {"id": f"eq.{plan_id}"}
        if expected_revision is not None:
            params["revision"] = f"eq.{expected_revision}"
            revision = expected_revision + 1
        else:
            revision = self.load(plan_id).revision + 1

        rows = self._request("PATCH", params=params, json_data={"json_plan": record, "revision": revision})
        if not rows:
            raise ConflictError(f"Plan {plan_id} changed or disappeared before the write")
        return revision

    def create(self, record: Dict[str, Any]) -> str:
        plan_id = str(record.get("id") or uuid.uuid4())
        rows = self._request(
            "POST",
            json_data={"id": plan_id, "json_plan": {**record, "id": plan_id}, "revision": 1},
        )
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return str(rows[0].get("id", plan_id))
        return plan_id


def store_from_config(config: Dict[str, Any]) -> PlanStore:
    """Build the configured plan store backend."""
    store_cfg = config.get("store", {})
    backend = str(store_cfg.get("backend") or "file")

    if backend == "file":
        return FilePlanStore(resolve_store_dir(config))
    if backend == "rest":
        url = os.getenv("LIFTPLAN_STORE_URL") or store_cfg.get("url")
        if not url:
            raise StoreError("store.url is required for the rest backend")
        api_cfg = config.get("api", {})
        return RestPlanStore(
            base_url=str(url),
            api_key=os.getenv(str(store_cfg.get("api_key_env") or "LIFTPLAN_STORE_KEY"), ""),
            table=str(store_cfg.get("table") or "workout_plans"),
            rate_limit_delay=float(api_cfg.get("rate_limit_delay", 0.0)),
            max_retries=int(api_cfg.get("max_retries", 3)),
            timeout_seconds=int(api_cfg.get("timeout_seconds", 30)),
        )
    raise StoreError(f"Unknown store backend: {backend}")
