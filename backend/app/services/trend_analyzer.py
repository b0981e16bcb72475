"""
Score Trend Analyzer
Direction and change of the visibility score across completed runs
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from app.adapters.storage import RunRecord
from app.config import TREND_THRESHOLDS


@dataclass
class ScoreTrend:
    trend_change: float  # latest score minus the previous one
    trend_direction: str  # "upward", "downward", "volatile", "stable"
    slope: float
    volatility: float


def _linear_regression_slope(values: Sequence[float]) -> float:
    """Least-squares slope using the run index as x"""
    n = len(values)
    sum_x = sum(range(n))
    sum_y = sum(values)
    sum_xy = sum(i * y for i, y in enumerate(values))
    sum_xx = sum(i * i for i in range(n))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def _coefficient_of_variation(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    if mean <= 0:
        return 0.0
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / mean


def analyze_score_trend(runs: Sequence[RunRecord]) -> ScoreTrend:
    """Runs must be in chronological order"""
    scores: List[float] = [run.total_score for run in runs]

    if len(scores) < 2:
        return ScoreTrend(trend_change=0.0, trend_direction="stable", slope=0.0, volatility=0.0)

    slope = _linear_regression_slope(scores)
    volatility = _coefficient_of_variation(scores)

    direction = "stable"
    if abs(slope) > TREND_THRESHOLDS["slope"]:
        direction = "upward" if slope > 0 else "downward"
    if volatility > TREND_THRESHOLDS["volatility"]:
        direction = "volatile"

    return ScoreTrend(
        trend_change=round(scores[-1] - scores[-2], 2),
        trend_direction=direction,
        slope=round(slope, 4),
        volatility=round(volatility, 4),
    )
