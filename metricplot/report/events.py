# metricplot/report/events.py
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List

from metricplot.report.base import Report
from metricplot.report.result import PlotResult


def _json_float(value: float) -> float | None:
    # NaN / ±inf are not valid JSON
    return value if math.isfinite(value) else None


class EventLogReport(Report):
    """
    events.jsonl: one structured event per checkpoint
    """

    def __init__(self, output_path: Path):
        self._path = Path(output_path)

    def render(self, result: PlotResult) -> Path:
        with open(self._path, "w", encoding="utf-8") as f:
            for i, iteration in enumerate(result.iterations):
                event = {
                    "iteration": iteration,
                    "dataset": result.token,
                    "metrics": {
                        name: _json_float(result.scores[m][i])
                        for m, name in enumerate(result.metric_names)
                    },
                }
                f.write(json.dumps(event) + "\n")
        return self._path


class JsonMetaReport(Report):
    """
    eval.json: run metadata + per-iteration scores
    """

    def __init__(self, output_path: Path, name: str = "experiment"):
        self._path = Path(output_path)
        self._name = name

    def render(self, result: PlotResult) -> Path:
        meta: Dict[str, Any] = {
            "name": self._name,
            "launch_mode": "Eval",
            "iteration_count": result.iterations[-1] + 1,
            "learn_sets": [],
            "test_sets": [result.token],
            "learn_metrics": [],
            "test_metrics": [
                {"name": name, "value": "Max" if hib else "Min"}
                for name, hib in zip(result.metric_names, result.higher_is_better)
            ],
        }
        iterations: List[Dict[str, Any]] = [
            {
                "iteration": iteration,
                "test": [_json_float(result.scores[m][i]) for m in range(len(result.metric_names))],
            }
            for i, iteration in enumerate(result.iterations)
        ]

        self._path.write_text(
            json.dumps({"meta": meta, "iterations": iterations}, indent=2),
            encoding="utf-8",
        )
        return self._path
