# metricplot/metrics/pairwise.py
from __future__ import annotations

import numpy as np
from scipy.special import log_expit

from metricplot.metrics.base import ErrorType, Metric
from metricplot.metrics.holder import StatState
from metricplot.metrics.reducers import first_stat, weighted_mean


def pair_margins(approx: np.ndarray, pairs: np.ndarray) -> np.ndarray:
    """winner - loser on dimension 0"""
    return approx[0, pairs[:, 0]] - approx[0, pairs[:, 1]]


def _pair_logit_accumulate(approx, pairs, pair_weight, begin, end) -> StatState:
    margin = pair_margins(approx, pairs[begin:end])
    w = pair_weight[begin:end]
    return StatState.of(float(np.sum(-w * log_expit(margin))), float(np.sum(w)))


def _pair_accuracy_accumulate(approx, pairs, pair_weight, begin, end) -> StatState:
    margin = pair_margins(approx, pairs[begin:end])
    w = pair_weight[begin:end]
    return StatState.of(float(np.sum(w * (margin > 0))), float(np.sum(w)))


def _pair_margin_median(approx, pairs, pair_weight) -> StatState:
    margin = pair_margins(approx, pairs)
    order = np.argsort(margin, kind="stable")
    cum = np.cumsum(pair_weight[order])
    idx = int(np.searchsorted(cum, cum[-1] / 2.0))
    return StatState.of(float(margin[order][idx]))


def pair_logit() -> Metric:
    return Metric(
        description="PairLogit",
        error_type=ErrorType.PAIRWISE,
        additive=True,
        accumulate=_pair_logit_accumulate,
        finalize=weighted_mean,
    )


def pair_accuracy() -> Metric:
    return Metric(
        description="PairAccuracy",
        error_type=ErrorType.PAIRWISE,
        additive=True,
        accumulate=_pair_accuracy_accumulate,
        finalize=weighted_mean,
        higher_is_better=True,
    )


def pair_margin_median() -> Metric:
    return Metric(
        description="PairMarginMedian",
        error_type=ErrorType.PAIRWISE,
        additive=False,
        evaluate_full=_pair_margin_median,
        finalize=first_stat,
        higher_is_better=True,
    )
