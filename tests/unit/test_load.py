from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import pytest

from liftplan.core.load import load_percentage, parse_target_reps, suggest_progression, suggest_weight
from liftplan.core.models import PerformanceSet


def _sets(rows: List[Tuple[int, Optional[int]]], weight: float = 80) -> List[PerformanceSet]:
    return [PerformanceSet(weight=weight, reps=reps, rir=rir) for reps, rir in rows]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(6, 6), ("12", 12), ("8-12", 10), ("8-11", 10), ("6 - 8", 7), ("5 reps", 5)],
)
def test_parse_target_reps(value, expected: int) -> None:
    assert parse_target_reps(value) == expected


def test_parse_target_reps_falls_back_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="liftplan.core.load"):
        assert parse_target_reps("AMRAP") == 10
    assert "AMRAP" in caplog.text


@pytest.mark.parametrize(
    ("reps", "percentage"),
    [(1, 0.90), (3, 0.90), (4, 0.85), (8, 0.80), (12, 0.75), (15, 0.70), (16, 0.65), (40, 0.65)],
)
def test_load_percentage_table(reps: int, percentage: float) -> None:
    assert load_percentage(reps) == percentage


def test_suggest_weight_rep_range() -> None:
    assert suggest_weight(100, "8-12", 2) == 75


def test_suggest_weight_to_failure() -> None:
    assert suggest_weight(100, 5, 0) == 85


def test_suggest_weight_rounds_to_increment() -> None:
    assert suggest_weight(140, 3, 0) == 125
    assert suggest_weight(101, 10, 2) == 75
    assert suggest_weight(130, 8, 0, increment=5) == 105


def test_suggest_weight_high_rep_floor() -> None:
    assert suggest_weight(100, 15, 2) == 65


def test_suggest_weight_uses_default_rir() -> None:
    assert suggest_weight(100, 10) == suggest_weight(100, 10, 2)


def test_baseline_with_too_few_sets() -> None:
    result = suggest_progression(_sets([(8, 1)]), 80, 8)
    assert result.weight == 80
    assert result.note == "Baseline suggestion"


def test_progress_on_consistent_performance() -> None:
    result = suggest_progression(_sets([(8, 1), (9, 0), (8, 1)]), 80, 8)
    assert result.weight == 82.5
    assert result.note == "Progressed +2.5kg - consistent performance"


def test_progress_uses_large_step_when_heavy() -> None:
    result = suggest_progression(_sets([(8, 1), (8, 1)], weight=120), 120, 8)
    assert result.weight == 125
    assert "+5kg" in result.note


def test_missing_rir_counts_as_zero_and_progresses() -> None:
    result = suggest_progression(_sets([(8, None), (8, None)]), 80, 8)
    assert result.weight == 82.5


def test_reduce_when_reps_missed() -> None:
    result = suggest_progression(_sets([(10, 2), (7, 2), (10, 2)]), 80, 10)
    assert result.weight == 77.5
    assert result.note == "Reduced -2.5kg - allow recovery"


def test_reduce_after_repeated_failures() -> None:
    result = suggest_progression(_sets([(8, 0), (8, 0), (7, 2)], weight=100), 100, 8)
    assert result.weight == 95


def test_single_failure_holds_weight() -> None:
    result = suggest_progression(_sets([(8, 0), (8, 2), (9, 2)]), 80, 8)
    assert result.weight == 80
    assert result.note == "Maintain current weight"


def test_reduction_never_drops_more_than_ten_percent() -> None:
    result = suggest_progression(_sets([(4, 0), (4, 0)], weight=20), 20, 8)
    assert result.weight == 18


def test_only_recent_window_counts() -> None:
    result = suggest_progression(_sets([(3, 0), (3, 0), (8, 1), (8, 1), (8, 1)]), 80, 8)
    assert result.weight == 82.5


def test_progression_respects_settings() -> None:
    result = suggest_progression(
        _sets([(8, 1), (8, 1)]), 80, 8, {"units": "lb", "small_step": 5}
    )
    assert result.weight == 85
    assert result.note == "Progressed +5lb - consistent performance"
