# metricplot/metrics/reducers.py
from __future__ import annotations

import math

from metricplot.metrics.holder import StatState


def weighted_mean(state: StatState) -> float:
    """stats = [weighted_sum, weight_sum]"""
    if state.is_empty() or state.stats[1] == 0:
        return float("nan")
    return float(state.stats[0] / state.stats[1])


def weighted_rmse(state: StatState) -> float:
    mean = weighted_mean(state)
    return math.sqrt(mean) if not math.isnan(mean) else mean


def first_stat(state: StatState) -> float:
    if state.is_empty():
        return float("nan")
    return float(state.stats[0])
