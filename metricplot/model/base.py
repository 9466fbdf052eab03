# metricplot/model/base.py
from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class StagedModel(ABC):
    """
    StagedModel（additive over iterations）

    Contract:
    - apply(features, begin, end) returns the raw contribution of
      iterations [begin, end) as [approx_dimension][doc]
    - contributions of adjacent ranges add up:
        apply(X, a, b) + apply(X, b, c) == apply(X, a, c)
    - no IO, no state mutation
    """

    @property
    @abstractmethod
    def tree_count(self) -> int:
        ...

    @property
    @abstractmethod
    def approx_dimension(self) -> int:
        ...

    @abstractmethod
    def apply(self, features: np.ndarray, begin: int, end: int) -> np.ndarray:
        raise NotImplementedError
