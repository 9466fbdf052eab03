# metricplot/report/result.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd


@dataclass(frozen=True)
class PlotResult:
    """
    PlotResult (FINAL / FROZEN)

    Immutable score table of one eval run:
      - scores[metric][checkpoint]
      - partial_stats[metric][checkpoint] = raw StatState vector
      - iterations[checkpoint] = model iteration of the checkpoint
    """

    # -----------------------
    # identity
    # -----------------------
    token: str                         # dataset token in logs / eval.json

    # -----------------------
    # axes
    # -----------------------
    iterations: List[int]
    metric_names: List[str]
    higher_is_better: List[bool]

    # -----------------------
    # trajectories
    # -----------------------
    scores: List[List[float]]
    partial_stats: List[List[List[float]]]

    @property
    def checkpoint_count(self) -> int:
        return len(self.iterations)

    def to_frame(self) -> pd.DataFrame:
        """iter × metric score table"""
        return pd.DataFrame(
            {i: self.scores[i] for i in range(len(self.metric_names))},
            index=pd.Index(self.iterations, name="iter"),
        ).set_axis(self.metric_names, axis=1)
