# metricplot/data/pool.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np
import pandas as pd

from metricplot import logs
from metricplot.utils.errors import ResourceError, UserInputError


@dataclass
class Pool:
    """
    Pool（evaluation dataset, read-only after construction）

    - features:    [doc][feature]
    - target:      [doc]
    - weight:      [doc], defaults to ones
    - pairs:       [pair][2] = (winner, loser) document indices, may be empty
    - pair_weight: [pair], defaults to ones
    """

    features: np.ndarray
    target: np.ndarray
    weight: Optional[np.ndarray] = None
    pairs: Optional[np.ndarray] = None
    pair_weight: Optional[np.ndarray] = None

    def __post_init__(self):
        self.features = np.asarray(self.features, dtype=np.float64)
        if self.features.ndim == 1:
            self.features = self.features.reshape(-1, 1)
        self.target = np.asarray(self.target, dtype=np.float64).ravel()

        doc_count = self.target.size
        if self.features.shape[0] != doc_count:
            raise UserInputError(
                f"[Pool] features rows={self.features.shape[0]} "
                f"!= target size={doc_count}"
            )

        if self.weight is None:
            self.weight = np.ones(doc_count, dtype=np.float64)
        else:
            self.weight = np.asarray(self.weight, dtype=np.float64).ravel()
            if self.weight.size != doc_count:
                raise UserInputError(
                    f"[Pool] weight size={self.weight.size} != doc_count={doc_count}"
                )

        if self.pairs is None:
            self.pairs = np.zeros((0, 2), dtype=np.int64)
        else:
            self.pairs = np.asarray(self.pairs, dtype=np.int64).reshape(-1, 2)
            if self.pairs.size and (self.pairs.min() < 0 or self.pairs.max() >= doc_count):
                raise UserInputError("[Pool] pair index out of document range")

        if self.pair_weight is None:
            self.pair_weight = np.ones(len(self.pairs), dtype=np.float64)
        else:
            self.pair_weight = np.asarray(self.pair_weight, dtype=np.float64).ravel()
            if self.pair_weight.size != len(self.pairs):
                raise UserInputError("[Pool] pair_weight size != pair count")

    @property
    def doc_count(self) -> int:
        return int(self.target.size)

    @property
    def has_pairs(self) -> bool:
        return len(self.pairs) > 0


def _read_table(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise ResourceError(f"[Pool] file not found: {path}")
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix in (".tsv", ".tab"):
        return pd.read_csv(path, sep="\t")
    return pd.read_csv(path)


def load_pool(
        path: str | Path,
        *,
        target_column: str,
        weight_column: Optional[str] = None,
        feature_columns: Optional[List[str]] = None,
        pairs_path: str | Path | None = None,
) -> Pool:
    """
    parquet / csv / tsv → Pool

    pairs file columns: winner, loser[, weight]
    """
    df = _read_table(Path(path))

    if target_column not in df.columns:
        raise UserInputError(f"[Pool] target column {target_column!r} not in {path}")
    if weight_column is not None and weight_column not in df.columns:
        raise UserInputError(f"[Pool] weight column {weight_column!r} not in {path}")

    if feature_columns is None:
        excluded = {target_column, weight_column}
        feature_columns = [c for c in df.columns if c not in excluded]
    else:
        missing = [c for c in feature_columns if c not in df.columns]
        if missing:
            raise UserInputError(f"[Pool] feature columns {missing} not in {path}")

    pairs = None
    pair_weight = None
    if pairs_path is not None:
        pairs_df = _read_table(Path(pairs_path))
        missing = {"winner", "loser"} - set(pairs_df.columns)
        if missing:
            raise UserInputError(f"[Pool] pairs file misses columns {sorted(missing)}")
        pairs = pairs_df[["winner", "loser"]].to_numpy(dtype=np.int64)
        if "weight" in pairs_df.columns:
            pair_weight = pairs_df["weight"].to_numpy(dtype=np.float64)

    pool = Pool(
        features=df[feature_columns].to_numpy(dtype=np.float64),
        target=df[target_column].to_numpy(dtype=np.float64),
        weight=df[weight_column].to_numpy(dtype=np.float64) if weight_column else None,
        pairs=pairs,
        pair_weight=pair_weight,
    )

    logs.info(
        f"[Pool] loaded {path} docs={pool.doc_count} "
        f"features={len(feature_columns)} pairs={len(pool.pairs)}"
    )
    return pool
