# metricplot/model/calcer_on_pool.py
from __future__ import annotations

import numpy as np

from metricplot.data.pool import Pool
from metricplot.model.base import StagedModel
from metricplot.parallel.executor import LocalExecutor


class ModelCalcerOnPool:
    """
    Scoring applier: model × pool → raw contribution of an iteration range.

    Documents are scored in disjoint blocks on the shared executor.
    """

    def __init__(self, model: StagedModel, pool: Pool, executor: LocalExecutor):
        self.model = model
        self.pool = pool
        self.executor = executor

    def apply_model_multi(self, begin: int, end: int) -> np.ndarray:
        features = self.pool.features
        blocks = self.executor.map_blocks(
            0,
            self.pool.doc_count,
            lambda lo, hi: self.model.apply(features[lo:hi], begin, end),
        )
        if not blocks:
            return np.zeros((self.model.approx_dimension, 0), dtype=np.float64)
        return np.concatenate(blocks, axis=1)
