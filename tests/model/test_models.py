# tests/model/test_models.py
import joblib
import numpy as np
import pytest
from sklearn.ensemble import GradientBoostingRegressor

from metricplot.model.calcer_on_pool import ModelCalcerOnPool
from metricplot.model.linear import LinearStagedModel
from metricplot.model.loader import load_model
from metricplot.model.sklearn_staged import SklearnStagedModel
from metricplot.utils.errors import ResourceError, UserInputError


@pytest.fixture(scope="module")
def gbr():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(60, 4))
    y = X[:, 0] - 2 * X[:, 1] + rng.normal(scale=0.1, size=60)
    return GradientBoostingRegressor(n_estimators=8, max_depth=2, random_state=0).fit(X, y), X


def test_linear_ranges_are_additive(model, pool):
    X = pool.features
    assert np.allclose(model.apply(X, 0, 4) + model.apply(X, 4, 10), model.apply(X, 0, 10))
    assert model.apply(X, 3, 3).shape == (1, pool.doc_count)
    assert not model.apply(X, 3, 3).any()


def test_sklearn_adapter_matches_staged_predict(gbr):
    est, X = gbr
    staged = list(est.staged_predict(X))
    model = SklearnStagedModel(est)

    assert model.tree_count == 8
    assert model.approx_dimension == 1
    # staged[k] = prediction after k + 1 trees
    assert np.allclose(model.apply(X, 2, 6)[0], staged[5] - staged[1])


def test_sklearn_adapter_rejects_unfitted():
    with pytest.raises(TypeError):
        SklearnStagedModel(GradientBoostingRegressor())


def test_load_model_round_trip(tmp_path, gbr, model):
    est, _ = gbr
    joblib.dump(est, tmp_path / "gbr.joblib")
    joblib.dump(model, tmp_path / "linear.joblib")

    assert isinstance(load_model(tmp_path / "gbr.joblib"), SklearnStagedModel)
    loaded = load_model(tmp_path / "linear.joblib")
    assert isinstance(loaded, LinearStagedModel)
    assert np.array_equal(loaded.coef, model.coef)


def test_load_model_errors(tmp_path):
    with pytest.raises(ResourceError):
        load_model(tmp_path / "missing.joblib")

    joblib.dump({"not": "a model"}, tmp_path / "dict.joblib")
    with pytest.raises(UserInputError):
        load_model(tmp_path / "dict.joblib")


def test_calcer_on_pool_matches_model_apply(model, pool, executor):
    scorer = ModelCalcerOnPool(model, pool, executor)

    assert np.allclose(scorer.apply_model_multi(2, 7), model.apply(pool.features, 2, 7))
