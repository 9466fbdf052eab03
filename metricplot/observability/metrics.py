#!filepath: metricplot/observability/metrics.py
from dataclasses import dataclass, field
from typing import Dict, Any
from metricplot import logs


@dataclass
class MetricRecorder:
    """
    运行期计数（checkpoints / spill_files 等），不是评估指标。
    """
    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any):
        if not self.enabled:
            return
        self.metrics[name] = value
        logs.info(f"[Metric] {name} = {value}")
