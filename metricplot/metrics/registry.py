# metricplot/metrics/registry.py
from typing import Callable, Dict, List

from metricplot.metrics.base import Metric
from metricplot.metrics import pairwise, per_object
from metricplot.utils.errors import ConfigurationError

_METRIC_REGISTRY: Dict[str, Callable[[], Metric]] = {
    "RMSE": per_object.rmse,
    "MAE": per_object.mae,
    "Logloss": per_object.logloss,
    "Accuracy": per_object.accuracy,
    "PairLogit": pairwise.pair_logit,
    "PairAccuracy": pairwise.pair_accuracy,
    "PairMarginMedian": pairwise.pair_margin_median,
}


def available_metrics() -> List[str]:
    return list(_METRIC_REGISTRY)


def resolve_metric(name: str) -> Metric:
    if name not in _METRIC_REGISTRY:
        available = ", ".join(_METRIC_REGISTRY)
        raise ConfigurationError(
            f"No metric named {name!r}. Available: {available}"
        )

    return _METRIC_REGISTRY[name]()


def resolve_metrics(names: List[str]) -> List[Metric]:
    return [resolve_metric(name) for name in names]
