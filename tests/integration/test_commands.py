from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml

from liftplan.__main__ import app


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    store_dir = tmp_path / "store"
    monkeypatch.setenv("LIFTPLAN_CONFIG_FILE", str(tmp_path / "missing.toml"))
    monkeypatch.setenv("LIFTPLAN_STORE_DIR", str(store_dir))
    monkeypatch.delenv("LIFTPLAN_CATALOG", raising=False)
    monkeypatch.delenv("LIFTPLAN_STORE_URL", raising=False)
    return store_dir


def test_config_error_exits(runner, write_temp_toml) -> None:
    path = write_temp_toml("broken.toml", "[load\nunits = 'kg'")
    result = runner.invoke(app, ["--config", str(path), "stats", "--help"])
    assert result.exit_code == 2
    assert "Config error" in result.stdout


def test_validate_json_output(runner, write_temp_json, legacy_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", legacy_plan)
    result = runner.invoke(app, ["--json", "validate", str(path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"is_valid": True, "errors": []}


def test_validate_from_stdin(runner, modular_plan: Dict[str, Any]) -> None:
    result = runner.invoke(app, ["--plain", "validate", "--stdin"], input=json.dumps(modular_plan))
    assert result.exit_code == 0
    assert "valid\ttrue" in result.stdout


def test_validate_reports_errors(runner, write_temp_json, modular_plan: Dict[str, Any]) -> None:
    modular_plan["workouts"][0]["modules"][1]["order"] = 5
    path = write_temp_json("plan.json", modular_plan)

    result = runner.invoke(app, ["--json", "validate", str(path)])

    assert result.exit_code == 1
    payload = json.loads(result.stdout)
    assert payload["is_valid"] is False
    assert "Day 1: module orders must be sequential starting from 0" in payload["errors"]


def test_validate_requires_input(runner) -> None:
    result = runner.invoke(app, ["validate"])
    assert result.exit_code == 2


def test_convert_to_modular_stdout(runner, write_temp_json, legacy_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", legacy_plan)
    result = runner.invoke(app, ["--json", "convert", str(path)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["enabled_modules"] == ["warmup", "main", "cooldown"]
    assert [module["type"] for module in payload["workouts"][0]["modules"]] == ["warmup", "main", "cooldown"]


def test_convert_to_legacy_yaml_file(runner, write_temp_json, modular_plan: Dict[str, Any], tmp_path: Path) -> None:
    path = write_temp_json("plan.json", modular_plan)
    output = tmp_path / "out" / "legacy.yaml"

    result = runner.invoke(app, ["--json", "convert", str(path), "--to", "legacy", "--output", str(output)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"status": "converted", "output": str(output)}
    written = yaml.safe_load(output.read_text())
    assert [e["exercise_name"] for e in written["workouts"][0]["exercises"]] == [
        "Jumping Jacks",
        "Back Squat",
        "Bench Press",
    ]


def test_convert_rejects_unknown_target(runner, write_temp_json, legacy_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", legacy_plan)
    result = runner.invoke(app, ["convert", str(path), "--to", "circuit"])
    assert result.exit_code == 2


def test_convert_invalid_plan_plain_errors(runner, write_temp_json) -> None:
    path = write_temp_json("plan.json", {"name": "Only a name"})
    result = runner.invoke(app, ["--plain", "convert", str(path)])
    assert result.exit_code == 1
    assert "error\tWorkout description is required and must be a string" in result.stdout


def test_stats_json(runner, write_temp_json, legacy_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", legacy_plan)
    result = runner.invoke(app, ["--json", "stats", str(path)])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total_exercises"] == 7
    assert payload["average_duration"] == 23
    assert payload["format"] == "legacy"


def test_stats_rich_table(runner, write_temp_json, modular_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", modular_plan)
    result = runner.invoke(app, ["stats", str(path)])
    assert result.exit_code == 0
    assert "Plan stats (modular)" in result.stdout
    assert "Muscle groups" in result.stdout


def test_resolve_with_catalog(
    runner, write_temp_json, legacy_plan: Dict[str, Any], catalog_records: List[Dict[str, Any]]
) -> None:
    del legacy_plan["workouts"][1]["exercises"][3]
    plan_path = write_temp_json("plan.json", legacy_plan)
    catalog_path = write_temp_json("catalog.json", {"exercises": catalog_records})

    result = runner.invoke(app, ["--json", "resolve", str(plan_path), "--catalog", str(catalog_path)])

    assert result.exit_code == 0
    bench = json.loads(result.stdout)["workouts"][0]["exercises"][0]
    assert bench["primary_muscles"] == ["chest", "triceps", "shoulders"]


def test_resolve_requires_catalog(runner, write_temp_json, legacy_plan: Dict[str, Any]) -> None:
    path = write_temp_json("plan.json", legacy_plan)
    result = runner.invoke(app, ["resolve", str(path)])
    assert result.exit_code == 2


def test_fallback_from_configured_catalog(
    runner, write_temp_json, write_temp_toml, catalog_records: List[Dict[str, Any]]
) -> None:
    catalog_path = write_temp_json("catalog.json", catalog_records)
    config_path = write_temp_toml("config.toml", f'[catalog]\npath = "{catalog_path}"')

    result = runner.invoke(app, ["--plain", "--config", str(config_path), "fallback"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["name"] == "Basic Training Program"
    assert len(payload["workouts"][0]["modules"][0]["exercises"]) == 6


def test_plans_save_show_migrate(runner, write_temp_json, legacy_plan: Dict[str, Any], isolated_env: Path) -> None:
    path = write_temp_json("plan.json", legacy_plan)

    saved = runner.invoke(app, ["--json", "plans", "save", str(path)])
    assert saved.exit_code == 0
    assert json.loads(saved.stdout)["plan_id"] == "plan-legacy"
    assert (isolated_env / "plan-legacy.json").exists()

    shown = runner.invoke(app, ["--json", "plans", "show", "plan-legacy"])
    assert shown.exit_code == 0
    assert json.loads(shown.stdout)["format"] == "legacy"

    migrated = runner.invoke(app, ["--json", "plans", "migrate", "plan-legacy"])
    assert migrated.exit_code == 0
    row = json.loads(migrated.stdout)["results"][0]
    assert row == {"plan_id": "plan-legacy", "success": True, "errors": [], "migrated": True}

    again = runner.invoke(app, ["--plain", "plans", "migrate", "plan-legacy"])
    assert again.exit_code == 0
    assert again.stdout.strip() == "plan-legacy\tunchanged"

    shown = runner.invoke(app, ["--json", "plans", "show", "plan-legacy"])
    payload = json.loads(shown.stdout)
    assert payload["format"] == "modular"
    assert payload["plan"]["format_version"] == "2.0"


def test_plans_migrate_missing_plan(runner) -> None:
    result = runner.invoke(app, ["--plain", "plans", "migrate", "ghost"])
    assert result.exit_code == 1
    assert "ghost\tfailed\tPlan ghost not found" in result.stdout


def test_plans_save_rejects_invalid(runner, write_temp_json, isolated_env: Path) -> None:
    path = write_temp_json("plan.json", {"name": "Incomplete"})
    result = runner.invoke(app, ["--json", "plans", "save", str(path)])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["success"] is False
    assert not isolated_env.exists()


def test_strength_estimate_plain(runner) -> None:
    result = runner.invoke(app, ["--plain", "strength", "estimate", "--weight", "100", "--reps", "5"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "116.67\tEpley\thigh"


def test_strength_best_json(runner, write_temp_json) -> None:
    path = write_temp_json(
        "sets.json",
        [{"weight": 100, "reps": 5}, {"weight": 120, "reps": 3}, {"weight": 80, "reps": 12}],
    )
    result = runner.invoke(app, ["--json", "strength", "best", str(path)])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"estimate": 132.0, "formula": "Epley", "confidence": "high"}


def test_strength_best_without_usable_sets(runner, write_temp_json) -> None:
    path = write_temp_json("sets.json", [{"weight": 0, "reps": 5}])
    result = runner.invoke(app, ["strength", "best", str(path)])
    assert result.exit_code == 1
    assert "No usable sets" in result.stdout


def test_strength_suggest_json(runner) -> None:
    result = runner.invoke(app, ["--json", "strength", "suggest", "--one-rm", "100", "--reps", "8-12"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"weight": 75, "units": "kg"}


def test_strength_suggest_uses_config(runner, write_temp_toml) -> None:
    config_path = write_temp_toml("config.toml", '[load]\nunits = "lb"\nrounding_increment = 5')

    result = runner.invoke(
        app,
        ["--config", str(config_path), "strength", "suggest", "--one-rm", "130", "--reps", "8", "--rir", "0"],
    )

    assert result.exit_code == 0
    assert "105lb" in result.stdout


def test_strength_progress_plain(runner, write_temp_json) -> None:
    path = write_temp_json(
        "sets.json",
        {"sets": [{"weight": 80, "reps": 8, "rir": 1}, {"weight": 80, "reps": 9, "rir": 0}, {"weight": 80, "reps": 8, "rir": 1}]},
    )
    result = runner.invoke(app, ["--plain", "strength", "progress", str(path), "--current", "80", "--reps", "8"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "82.5\tProgressed +2.5kg - consistent performance"
