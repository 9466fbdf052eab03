# metricplot/report/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from metricplot import logs
from metricplot.report.result import PlotResult


class Report(ABC):
    """
    Report (FINAL / FROZEN)

    PlotResult -> side effects (files, figures)

    - Reports are read-only consumers of PlotResult
    - Reports never compute scores
    """

    @abstractmethod
    def render(self, result: PlotResult) -> Path:
        ...


class ReportPipeline:
    def __init__(self, reports: List[Report]):
        self._reports = reports

    def render_all(self, result: PlotResult) -> List[Path]:
        outputs = []
        for r in self._reports:
            path = r.render(result)
            logs.info(f"[Report] {type(r).__name__} -> {path}")
            outputs.append(path)
        return outputs
