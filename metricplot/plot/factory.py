# metricplot/plot/factory.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from metricplot import logs
from metricplot.metrics.base import Metric
from metricplot.metrics.registry import resolve_metric
from metricplot.model.base import StagedModel
from metricplot.observability.instrumentation import Instrumentation
from metricplot.parallel.executor import LocalExecutor
from metricplot.plot.calcer import MetricsPlotCalcer
from metricplot.plot.spill_store import ApproxStore


def resolve_iteration_window(model: StagedModel, begin: int, end: int) -> tuple[int, int]:
    """
    end == 0          → all model iterations
    end > tree_count  → clamped to tree_count
    """
    tree_count = model.tree_count
    if end == 0:
        return begin, tree_count
    if end > tree_count:
        logs.info(
            f"[MetricCalcerFactory] end={end} exceeds tree_count={tree_count}, clamped"
        )
        return begin, tree_count
    return begin, end


def create_metric_calcer(
        model: StagedModel,
        begin: int,
        end: int,
        eval_period: int,
        executor: LocalExecutor,
        tmp_dir: str | Path,
        metrics: Sequence[Union[Metric, str]],
        *,
        delete_tmp_dir_on_exit: bool = True,
        store: Optional[ApproxStore] = None,
        inst: Optional[Instrumentation] = None,
) -> MetricsPlotCalcer:
    first, last = resolve_iteration_window(model, begin, end)

    return MetricsPlotCalcer(
        model,
        executor,
        [resolve_metric(m) if isinstance(m, str) else m for m in metrics],
        first=first,
        last=last,
        step=eval_period,
        tmp_dir=tmp_dir,
        delete_tmp_dir_on_exit=delete_tmp_dir_on_exit,
        store=store,
        inst=inst,
    )
