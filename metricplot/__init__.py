#!filepath: metricplot/__init__.py

from .utils.logger import Logging, logs, init_logging
from .utils.filesystem import FileSystem
from .config.app_config import AppConfig

# alias 简化调用
fs = FileSystem

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "fs",
    "AppConfig",
]
