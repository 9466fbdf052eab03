from .base import ErrorType, Metric
from .holder import StatState
from .registry import available_metrics, resolve_metric, resolve_metrics

__all__ = [
    "ErrorType", "Metric", "StatState",
    "available_metrics", "resolve_metric", "resolve_metrics",
]
