# metricplot/model/loader.py
from __future__ import annotations

from pathlib import Path

import joblib

from metricplot import logs
from metricplot.model.base import StagedModel
from metricplot.model.sklearn_staged import SklearnStagedModel
from metricplot.utils.errors import ResourceError, UserInputError


def load_model(path: str | Path) -> StagedModel:
    """
    joblib artifact → StagedModel

    Accepts either a pickled StagedModel or a fitted sklearn
    gradient boosting estimator.
    """
    path = Path(path)
    if not path.exists():
        raise ResourceError(f"[ModelLoader] model file not found: {path}")

    obj = joblib.load(path)

    if isinstance(obj, StagedModel):
        model = obj
    elif hasattr(obj, "estimators_"):
        model = SklearnStagedModel(obj)
    else:
        raise UserInputError(
            f"[ModelLoader] unsupported model type {type(obj).__name__} in {path}"
        )

    logs.info(
        f"[ModelLoader] loaded {path.name} type={type(model).__name__} "
        f"trees={model.tree_count} dim={model.approx_dimension}"
    )
    return model
