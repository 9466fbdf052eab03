# metricplot/metrics/holder.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from metricplot.utils.errors import InvariantViolation


@dataclass
class StatState:
    """
    StatState（metric-defined aggregable statistics）

    Contract:
    - add() is associative and the empty state is its identity, so the
      states of a partitioned document range add up to the state of the
      whole range
    - the layout of `stats` is private to the metric that produced it
    """

    stats: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))

    def __post_init__(self):
        self.stats = np.asarray(self.stats, dtype=np.float64).ravel()

    @classmethod
    def of(cls, *values: float) -> "StatState":
        return cls(np.array(values, dtype=np.float64))

    @classmethod
    def combine(cls, states: Iterable["StatState"]) -> "StatState":
        result = cls()
        for state in states:
            result.add(state)
        return result

    def is_empty(self) -> bool:
        return self.stats.size == 0

    def add(self, other: "StatState") -> "StatState":
        if other.is_empty():
            return self
        if self.is_empty():
            self.stats = other.stats.copy()
            return self
        if self.stats.shape != other.stats.shape:
            raise InvariantViolation(
                f"[StatState] cannot add stats of shape {other.stats.shape} "
                f"to {self.stats.shape}"
            )
        self.stats = self.stats + other.stats
        return self

    def copy(self) -> "StatState":
        return StatState(self.stats.copy())

    def __len__(self) -> int:
        return int(self.stats.size)
