# metricplot/metrics/per_object.py
from __future__ import annotations

import numpy as np
from scipy.special import log_expit

from metricplot.metrics.base import ErrorType, Metric
from metricplot.metrics.holder import StatState
from metricplot.metrics.reducers import weighted_mean, weighted_rmse
from metricplot.utils.errors import ConfigurationError


def _slice(approx: np.ndarray, target: np.ndarray, weight: np.ndarray, begin: int, end: int):
    # 单输出指标只看 dimension 0
    return approx[0, begin:end], target[begin:end], weight[begin:end]


def _rmse_accumulate(approx, target, weight, begin, end) -> StatState:
    a, t, w = _slice(approx, target, weight, begin, end)
    return StatState.of(float(np.sum(w * (a - t) ** 2)), float(np.sum(w)))


def _mae_accumulate(approx, target, weight, begin, end) -> StatState:
    a, t, w = _slice(approx, target, weight, begin, end)
    return StatState.of(float(np.sum(w * np.abs(a - t))), float(np.sum(w)))


def _logloss_accumulate(approx, target, weight, begin, end) -> StatState:
    a, t, w = _slice(approx, target, weight, begin, end)
    loss = -(t * log_expit(a) + (1.0 - t) * log_expit(-a))
    return StatState.of(float(np.sum(w * loss)), float(np.sum(w)))


def _accuracy_accumulate(approx, target, weight, begin, end) -> StatState:
    a, t, w = _slice(approx, target, weight, begin, end)
    correct = (a > 0) == (t > 0.5)
    return StatState.of(float(np.sum(w * correct)), float(np.sum(w)))


def _check_probability_target(target: np.ndarray) -> None:
    if target.size and (np.min(target) < 0 or np.max(target) > 1):
        raise ConfigurationError(
            "[Logloss] target values must lie in [0, 1] "
            f"(got min={np.min(target)}, max={np.max(target)})"
        )


def rmse() -> Metric:
    return Metric(
        description="RMSE",
        error_type=ErrorType.PER_OBJECT,
        additive=True,
        accumulate=_rmse_accumulate,
        finalize=weighted_rmse,
    )


def mae() -> Metric:
    return Metric(
        description="MAE",
        error_type=ErrorType.PER_OBJECT,
        additive=True,
        accumulate=_mae_accumulate,
        finalize=weighted_mean,
    )


def logloss() -> Metric:
    return Metric(
        description="Logloss",
        error_type=ErrorType.PER_OBJECT,
        additive=True,
        accumulate=_logloss_accumulate,
        finalize=weighted_mean,
        check_target=_check_probability_target,
    )


def accuracy() -> Metric:
    return Metric(
        description="Accuracy",
        error_type=ErrorType.PER_OBJECT,
        additive=True,
        accumulate=_accuracy_accumulate,
        finalize=weighted_mean,
        higher_is_better=True,
    )
