from .calcer import MetricsPlotCalcer
from .factory import create_metric_calcer, resolve_iteration_window
from .spill_store import FileApproxStore, MemoryApproxStore, TargetWeightBuffer

__all__ = [
    "MetricsPlotCalcer",
    "create_metric_calcer", "resolve_iteration_window",
    "FileApproxStore", "MemoryApproxStore", "TargetWeightBuffer",
]
