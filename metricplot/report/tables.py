# metricplot/report/tables.py
from __future__ import annotations

from pathlib import Path

import pandas as pd

from metricplot.report.base import Report
from metricplot.report.result import PlotResult


class PartialStatsReport(Report):
    """
    partial_stats.tsv: iter + <metric>_stat<j> columns (raw StatState)
    """

    def __init__(self, output_path: Path):
        self._path = Path(output_path)

    def render(self, result: PlotResult) -> Path:
        columns = {"iter": result.iterations}
        for metric_id, name in enumerate(result.metric_names):
            per_checkpoint = result.partial_stats[metric_id]
            width = max((len(s) for s in per_checkpoint), default=0)
            for j in range(width):
                columns[f"{name}_stat{j}"] = [
                    s[j] if j < len(s) else float("nan") for s in per_checkpoint
                ]

        pd.DataFrame(columns).to_csv(self._path, sep="\t", index=False)
        return self._path


class MetricsFileReport(Report):
    """
    <metrics_file>: iter + one score column per metric
    """

    def __init__(self, output_path: Path):
        self._path = Path(output_path)

    def render(self, result: PlotResult) -> Path:
        result.to_frame().to_csv(self._path, sep="\t", index_label="iter")
        return self._path
