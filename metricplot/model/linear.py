# metricplot/model/linear.py
from __future__ import annotations

import numpy as np

from metricplot.model.base import StagedModel


class LinearStagedModel(StagedModel):
    """
    One linear map per iteration: coef[iteration][dimension][feature].
    """

    def __init__(self, coef: np.ndarray):
        coef = np.asarray(coef, dtype=np.float64)
        if coef.ndim == 2:
            coef = coef[:, np.newaxis, :]
        if coef.ndim != 3:
            raise ValueError(f"[LinearStagedModel] coef must be 3-D, got shape {coef.shape}")
        self.coef = coef

    @property
    def tree_count(self) -> int:
        return int(self.coef.shape[0])

    @property
    def approx_dimension(self) -> int:
        return int(self.coef.shape[1])

    def apply(self, features: np.ndarray, begin: int, end: int) -> np.ndarray:
        if end <= begin:
            return np.zeros((self.approx_dimension, features.shape[0]), dtype=np.float64)
        return self.coef[begin:end].sum(axis=0) @ features.T
