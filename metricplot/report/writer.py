# metricplot/report/writer.py
from __future__ import annotations

from pathlib import Path
from typing import List

from metricplot.report.base import Report, ReportPipeline
from metricplot.report.events import EventLogReport, JsonMetaReport
from metricplot.report.learning_curve import LearningCurveReport
from metricplot.report.result import PlotResult
from metricplot.report.tables import MetricsFileReport, PartialStatsReport
from metricplot.utils.filesystem import FileSystem


def build_report_pipeline(
        result_dir: Path,
        *,
        metrics_file: str = "eval_metrics.tsv",
        plot_curve: bool = False,
) -> ReportPipeline:
    reports: List[Report] = [
        PartialStatsReport(result_dir / "partial_stats.tsv"),
        MetricsFileReport(result_dir / metrics_file),
        EventLogReport(result_dir / "events.jsonl"),
        JsonMetaReport(result_dir / "eval.json"),
    ]
    if plot_curve:
        reports.append(LearningCurveReport(result_dir / "learning_curve.png"))
    return ReportPipeline(reports)


def save_result(
        result: PlotResult,
        result_dir: str | Path,
        *,
        metrics_file: str = "eval_metrics.tsv",
        plot_curve: bool = False,
) -> List[Path]:
    result_dir = FileSystem.ensure_dir(result_dir)
    pipeline = build_report_pipeline(
        result_dir, metrics_file=metrics_file, plot_curve=plot_curve
    )
    return pipeline.render_all(result)
