# tests/test_cli.py
import pandas as pd
import pytest
import yaml
from typer.testing import CliRunner

from metricplot import __version__
from metricplot.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("METRICPLOT_TMP_DIR", raising=False)
    data = {
        "log": {"dir": str(tmp_path / "logs"), "level": "DEBUG"},
        "plot": {
            "metrics": ["MAE", "PairAccuracy"],
            "tmp_dir": str(tmp_path / "spill"),
            "result_dir": str(tmp_path / "out"),
            "plot_curve": True,
        },
        "executor": {"thread_count": 2, "min_block_size": 8},
    }
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_metrics_lists_registry():
    result = runner.invoke(app, ["metrics"])

    assert result.exit_code == 0
    assert "PairMarginMedian" in result.stdout
    assert "non-additive" in result.stdout


def test_eval_end_to_end(tmp_path, eval_files, config_file):
    result = runner.invoke(app, [
        "eval",
        "--model", str(eval_files["model"]),
        "--data", str(eval_files["data"]),
        "--target", "label",
        "--weight", "w",
        "--pairs", str(eval_files["pairs"]),
        "--step", "4",
        "--config", str(config_file),
        "--no-plot",
    ])

    assert result.exit_code == 0, result.stdout
    table = pd.read_csv(tmp_path / "out" / "eval_metrics.tsv", sep="\t")
    assert table["iter"].tolist() == [0, 4, 8, 10]
    assert list(table.columns) == ["iter", "MAE", "PairAccuracy"]
    assert not (tmp_path / "out" / "learning_curve.png").exists()


def test_eval_metric_override(tmp_path, eval_files, config_file):
    result = runner.invoke(app, [
        "eval",
        "--model", str(eval_files["model"]),
        "--data", str(eval_files["data"]),
        "--target", "label",
        "-m", "RMSE",
        "--end", "3",
        "-f", "f0", "-f", "f1", "-f", "f2",
        "--config", str(config_file),
    ])

    assert result.exit_code == 0, result.stdout
    table = pd.read_csv(tmp_path / "out" / "eval_metrics.tsv", sep="\t")
    assert list(table.columns) == ["iter", "RMSE"]
    assert table["iter"].tolist() == [0, 1, 2, 3]
    assert (tmp_path / "out" / "learning_curve.png").exists()


@pytest.mark.parametrize(
    "extra",
    [
        ["--step", "0"],
        ["-m", "NoSuchMetric"],
        ["-m", "RMSE", "-m", "RMSE"],
        ["--target", "missing"],
        ["-f", "nope"],
    ],
)
def test_eval_errors_exit_with_code_1(tmp_path, eval_files, config_file, extra):
    args = [
        "eval",
        "--model", str(eval_files["model"]),
        "--data", str(eval_files["data"]),
        "--target", "label",
        "--config", str(config_file),
    ]
    result = runner.invoke(app, args + extra)

    assert result.exit_code == 1
    assert not (tmp_path / "out").exists()
