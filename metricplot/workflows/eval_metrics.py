# metricplot/workflows/eval_metrics.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from metricplot import logs
from metricplot.config.app_config import AppConfig
from metricplot.data.pool import load_pool
from metricplot.metrics.registry import resolve_metrics
from metricplot.model.loader import load_model
from metricplot.observability.instrumentation import Instrumentation
from metricplot.parallel.executor import LocalExecutor
from metricplot.plot.factory import create_metric_calcer
from metricplot.report.result import PlotResult
from metricplot.report.writer import save_result


@logs.catch("eval metrics run failed")
def run_eval_metrics(
        *,
        cfg: AppConfig,
        model_path: str | Path,
        data_path: str | Path,
        target_column: str,
        weight_column: Optional[str] = None,
        feature_columns: Optional[List[str]] = None,
        pairs_path: str | Path | None = None,
) -> PlotResult:
    """
    Eval-metrics workflow:
        model + dataset → score trajectory → result_dir
    """
    plot = cfg.plot

    model = load_model(model_path)
    pool = load_pool(
        data_path,
        target_column=target_column,
        weight_column=weight_column,
        feature_columns=feature_columns,
        pairs_path=pairs_path,
    )
    metrics = resolve_metrics(plot.metrics)
    inst = Instrumentation()

    with LocalExecutor(cfg.executor.thread_count, cfg.executor.min_block_size) as executor:
        with create_metric_calcer(
            model,
            plot.begin,
            plot.end,
            plot.step,
            executor,
            plot.tmp_dir,
            metrics,
            delete_tmp_dir_on_exit=plot.delete_tmp_dir_on_exit,
            inst=inst,
        ) as calcer:
            calcer.proceed_dataset(pool)
            result = calcer.get_result()

    save_result(
        result,
        plot.result_dir,
        metrics_file=plot.metrics_file,
        plot_curve=plot.plot_curve,
    )

    inst.generate_timeline_report(Path(data_path).name)
    return result
