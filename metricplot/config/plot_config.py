# metricplot/config/plot_config.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class PlotConfig(BaseModel):
    """
    PlotConfig（eval-metrics run）

    Iteration window semantics:
    - end == 0  → all model iterations
    - end > tree_count → clamped by the factory
    """

    # iteration window
    begin: int = Field(default=0, ge=0)
    end: int = Field(default=0, ge=0)
    step: int = Field(default=1, gt=0)

    # metrics
    metrics: List[str] = Field(default_factory=lambda: ["RMSE"])

    # spill / output
    tmp_dir: str = "plot_tmp"
    delete_tmp_dir_on_exit: bool = True
    result_dir: str = "eval_result"
    metrics_file: str = "eval_metrics.tsv"
    plot_curve: bool = True
