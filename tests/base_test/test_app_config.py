#!filepath: tests/base_test/test_app_config.py
import pytest
import yaml
from pydantic import ValidationError

from metricplot.config import AppConfig
from metricplot.config.executor_config import ExecutorConfig
from metricplot.config.log_config import LogConfig
from metricplot.config.plot_config import PlotConfig


@pytest.fixture
def sample_config_file(tmp_path):
    """
    创建临时 YAML 配置文件用于测试
    """
    data = {
        "log": {"dir": "logs", "level": "DEBUG"},
        "plot": {
            "begin": 2,
            "end": 0,
            "step": 5,
            "metrics": ["RMSE", "PairLogit"],
            "tmp_dir": "spill",
            "result_dir": "out",
        },
        "executor": {"thread_count": 2, "min_block_size": 64},
    }

    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
    return config_file


def test_app_config_load(sample_config_file, monkeypatch):
    monkeypatch.delenv("METRICPLOT_TMP_DIR", raising=False)
    cfg = AppConfig.load(path=str(sample_config_file))

    assert isinstance(cfg.log, LogConfig)
    assert isinstance(cfg.plot, PlotConfig)
    assert isinstance(cfg.executor, ExecutorConfig)

    assert cfg.log.level == "DEBUG"
    assert (cfg.plot.begin, cfg.plot.end, cfg.plot.step) == (2, 0, 5)
    assert cfg.plot.metrics == ["RMSE", "PairLogit"]
    assert cfg.plot.tmp_dir == "spill"
    assert cfg.plot.metrics_file == "eval_metrics.tsv"
    assert cfg.plot.delete_tmp_dir_on_exit is True
    assert cfg.executor.thread_count == 2


def test_default_config_loads(monkeypatch):
    monkeypatch.delenv("METRICPLOT_TMP_DIR", raising=False)
    cfg = AppConfig.load()

    assert cfg.plot.tmp_dir == "plot_tmp"
    assert cfg.plot.step == 1


def test_env_overrides_tmp_dir(sample_config_file, monkeypatch):
    monkeypatch.setenv("METRICPLOT_TMP_DIR", "/scratch/plot")
    cfg = AppConfig.load(path=str(sample_config_file))

    assert cfg.plot.tmp_dir == "/scratch/plot"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load(path=str(tmp_path / "nope.yml"))


@pytest.mark.parametrize("plot", [{"step": 0}, {"begin": -1}, {"end": -3}])
def test_invalid_window_should_fail(tmp_path, plot):
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text(yaml.safe_dump({"plot": plot}))

    with pytest.raises(ValidationError):
        AppConfig.load(path=str(bad_file))


def test_missing_plot_section_should_fail(tmp_path):
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text(yaml.safe_dump({"log": {"dir": "logs"}}))

    with pytest.raises(ValidationError):
        AppConfig.load(path=str(bad_file))
