"""Numeric rounding and display helpers."""

from __future__ import annotations

import math
from typing import Optional, Union

Number = Union[int, float]


def round_to_places(value: float, places: int = 2) -> float:
    """Round half away from zero for non-negative values (2.005 -> 2.01)."""
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def round_to_increment(value: float, increment: float) -> float:
    """Round to the nearest multiple of increment, halves rounding up."""
    if increment <= 0:
        return value
    return math.floor(value / increment + 0.5) * increment


def format_weight(value: Number, units: str = "") -> str:
    """Format a load without trailing zeros: 5.0 -> '5', 2.5 -> '2.5'."""
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return f"{text}{units}"


def format_duration_minutes(minutes: Optional[Number]) -> str:
    """Format planned minutes as e.g. '45 min' or '1h 10min'."""
    if not minutes:
        return "N/A"
    total = int(round(float(minutes)))
    hours, rem = divmod(total, 60)
    if hours:
        return f"{hours}h {rem:02d}min" if rem else f"{hours}h"
    return f"{rem} min"
