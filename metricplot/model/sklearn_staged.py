# metricplot/model/sklearn_staged.py
from __future__ import annotations

from typing import Any

import numpy as np

from metricplot.model.base import StagedModel


class SklearnStagedModel(StagedModel):
    """
    Adapter over a fitted scikit-learn gradient boosting estimator
    (GradientBoostingRegressor / GradientBoostingClassifier).

    - iteration i == estimators_[i, :]
    - contribution = learning_rate * tree.predict(X)
    - the init estimator (bias) is NOT part of any iteration range
    """

    def __init__(self, estimator: Any):
        if not hasattr(estimator, "estimators_"):
            raise TypeError(
                f"[SklearnStagedModel] {type(estimator).__name__} is not a fitted "
                "gradient boosting estimator (no estimators_)"
            )
        self.estimator = estimator
        self._trees = estimator.estimators_
        self._learning_rate = float(estimator.learning_rate)

    @property
    def tree_count(self) -> int:
        return int(getattr(self.estimator, "n_estimators_", self._trees.shape[0]))

    @property
    def approx_dimension(self) -> int:
        return int(self._trees.shape[1])

    def apply(self, features: np.ndarray, begin: int, end: int) -> np.ndarray:
        out = np.zeros((self.approx_dimension, features.shape[0]), dtype=np.float64)
        for i in range(begin, min(end, self.tree_count)):
            for dim in range(self.approx_dimension):
                out[dim] += self._learning_rate * self._trees[i, dim].predict(features)
        return out
