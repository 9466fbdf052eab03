# tests/conftest.py
from __future__ import annotations

import numpy as np
import pytest
from loguru import logger

from metricplot.data.pool import Pool
from metricplot.model.linear import LinearStagedModel
from metricplot.parallel.executor import LocalExecutor


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def log_capture():
    """
    临时添加一个 sink 捕获 Loguru 输出
    """
    captured: list[str] = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)), level="DEBUG")
    yield captured
    logger.remove(sink_id)


@pytest.fixture
def executor():
    with LocalExecutor(thread_count=4, min_block_size=4) as ex:
        yield ex


def _pairs_within(rng, y: np.ndarray, lo: int, hi: int, n: int) -> np.ndarray:
    pairs = []
    while len(pairs) < n:
        i, j = rng.integers(lo, hi, size=2)
        if i == j or y[i] == y[j]:
            continue
        pairs.append((i, j) if y[i] > y[j] else (j, i))
    return np.array(pairs, dtype=np.int64)


@pytest.fixture
def pool() -> Pool:
    """
    40 docs, 3 features; pairs never cross doc 20
    (so the pool can be split into two consecutive parts).
    """
    rng = np.random.default_rng(7)
    X = rng.normal(size=(40, 3))
    y = X @ np.array([1.0, -2.0, 0.5]) + rng.normal(scale=0.1, size=40)
    w = rng.uniform(0.5, 2.0, size=40)
    pairs = np.concatenate([
        _pairs_within(rng, y, 0, 20, 15),
        _pairs_within(rng, y, 20, 40, 15),
    ])
    pair_weight = rng.uniform(0.5, 1.5, size=len(pairs))
    return Pool(features=X, target=y, weight=w, pairs=pairs, pair_weight=pair_weight)


@pytest.fixture
def model() -> LinearStagedModel:
    rng = np.random.default_rng(11)
    # 10 iterations, 1 dimension, 3 features
    return LinearStagedModel(rng.normal(scale=0.2, size=(10, 1, 3)))


@pytest.fixture
def eval_files(tmp_path, pool, model):
    """
    pool + model written to disk: eval.parquet / pairs.tsv / model.joblib
    """
    import joblib
    import pandas as pd

    frame = pd.DataFrame(pool.features, columns=["f0", "f1", "f2"])
    frame["label"] = pool.target
    frame["w"] = pool.weight
    frame.to_parquet(tmp_path / "eval.parquet")

    pd.DataFrame({
        "winner": pool.pairs[:, 0],
        "loser": pool.pairs[:, 1],
        "weight": pool.pair_weight,
    }).to_csv(tmp_path / "pairs.tsv", sep="\t", index=False)

    joblib.dump(model, tmp_path / "model.joblib")

    return {
        "model": tmp_path / "model.joblib",
        "data": tmp_path / "eval.parquet",
        "pairs": tmp_path / "pairs.tsv",
    }
