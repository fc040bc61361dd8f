"""
Numeric policies shared by evaluation and statistics.

Every score shown anywhere goes through these helpers so rounding is
identical across the evaluator and the aggregator.
"""

import math
from typing import Iterable

MIN_SCORE = 0
MAX_SCORE = 100
NEUTRAL_SCORE = 50


def round_percent(value: float) -> int:
    """Round half up to the nearest integer (2.5 -> 3, 2.4 -> 2)."""
    if value is None or math.isnan(value):
        return 0
    return int(math.floor(value + 0.5))


def clamp_score(raw: float) -> int:
    """Clamp a raw score into [0, 100] and round it."""
    if raw is None or math.isnan(raw):
        return MIN_SCORE
    bounded = max(MIN_SCORE, min(MAX_SCORE, raw))
    return round_percent(bounded)


def mean_or_zero(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty input."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)
