from .app_config import AppConfig
from .log_config import LogConfig
from .plot_config import PlotConfig
from .executor_config import ExecutorConfig

__all__ = ["AppConfig", "LogConfig", "PlotConfig", "ExecutorConfig"]
