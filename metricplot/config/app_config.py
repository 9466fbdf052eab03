#!filepath: metricplot/config/app_config.py
import yaml
from pydantic import BaseModel, Field
from dotenv import load_dotenv
import os

from .log_config import LogConfig
from .plot_config import PlotConfig
from .executor_config import ExecutorConfig


def project_root() -> str:
    """
    返回项目根目录（基于当前文件位置推导）:
    metricplot/config/app_config.py → metricplot/config → metricplot → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    plot: PlotConfig
    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 metricplot/config/base.yml
        - METRICPLOT_TMP_DIR 覆盖 plot.tmp_dir
        """
        root = project_root()

        # 1) 先加载 .env（在项目根目录下）
        load_dotenv(os.path.join(root, ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = os.path.join(os.path.dirname(__file__), "base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        tmp_dir = os.getenv("METRICPLOT_TMP_DIR")
        if tmp_dir and isinstance(raw.get("plot"), dict):
            raw["plot"]["tmp_dir"] = tmp_dir

        return cls(**raw)
