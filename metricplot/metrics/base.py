# metricplot/metrics/base.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from metricplot.metrics.holder import StatState

# approx[dim][doc], target|pairs, weight|pair_weight, begin, end
RangeAccumulate = Callable[[np.ndarray, np.ndarray, np.ndarray, int, int], StatState]
# approx[dim][doc], pairs|target, pair_weight|weight
FullEvaluate = Callable[[np.ndarray, np.ndarray, np.ndarray], StatState]


class ErrorType(str, Enum):
    PER_OBJECT = "PerObjectError"
    PAIRWISE = "PairwiseError"


@dataclass(frozen=True)
class Metric:
    """
    Metric capability (FINAL)

    A metric is a tagged record of pure functions, not a class hierarchy:

    - additive metrics expose `accumulate` over a [begin, end) range of
      documents (PER_OBJECT) or pairs (PAIRWISE)
    - non-additive metrics expose `evaluate_full` over the complete
      prediction matrix of one checkpoint
    - `finalize` reduces a StatState to the reported score

    The calculator dispatches on (`additive`, `error_type`) only.
    """

    description: str
    error_type: ErrorType
    additive: bool
    finalize: Callable[[StatState], float]
    accumulate: Optional[RangeAccumulate] = None
    evaluate_full: Optional[FullEvaluate] = None
    check_target: Optional[Callable[[np.ndarray], None]] = None
    higher_is_better: bool = False

    def __post_init__(self):
        if self.additive and self.accumulate is None:
            raise ValueError(f"[Metric] additive metric {self.description} needs accumulate")
        if not self.additive and self.evaluate_full is None:
            raise ValueError(f"[Metric] non-additive metric {self.description} needs evaluate_full")

    def is_additive(self) -> bool:
        return self.additive

    def get_final_error(self, state: StatState) -> float:
        return float(self.finalize(state))
