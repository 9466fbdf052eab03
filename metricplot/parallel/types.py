# metricplot/parallel/types.py
from enum import Enum


class ParallelKind(str, Enum):
    DOCUMENT = "document"
    PAIR = "pair"
