#!filepath: metricplot/utils/logger.py
import os
from functools import wraps
from time import perf_counter
from typing import Callable, Optional

from loguru import logger


class Logging:
    """
    metricplot 全局日志
    ---------------------------------------
    - 单一 loguru 文件 sink: <log_dir>/<date>.log
    - warning 同时回显到终端（spill 覆盖等需要用户看到）
    - catch(): workflow 入口的异常记录 + 耗时
    ---------------------------------------
    """

    FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

    def __init__(
        self,
        log_dir: str = "logs",
        rotation: str = "1 day",
        retention: str = "30 days",
        log_level: str = "INFO",
    ):
        self.configure(log_dir, rotation, retention, log_level)

    def configure(self, log_dir: str, rotation: str, retention: str, level: str) -> None:
        """
        替换全局 sink；已 import 的 logs 引用保持有效
        """
        self.log_dir = log_dir
        self.rotation = rotation
        self.retention = retention
        self.level = level

        os.makedirs(log_dir, exist_ok=True)
        logger.remove()
        logger.add(
            sink=os.path.join(log_dir, "{time:YYYY-MM-DD}.log"),
            rotation=rotation,
            retention=retention,
            level=level,
            format=self.FORMAT,
            enqueue=True,
            backtrace=True,
            diagnose=True,
        )
        logger.debug(f"[Logging] sink={log_dir} level={level}")

    def debug(self, msg: str):
        logger.debug(msg)

    def info(self, msg: str):
        logger.info(msg)

    def warning(self, msg: str):
        print(msg)
        logger.warning(msg)

    def catch(self, msg: str = "Exception occurred", log_time: bool = True) -> Callable:
        """
        记录异常（含 traceback）后原样抛出；不吞异常
        """

        def decorator(func: Callable):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start = perf_counter()
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    logger.exception(f"[ERROR] {func.__name__}: {msg}")
                    raise

                if log_time:
                    logger.info(f"[TIME] {func.__name__} took {perf_counter() - start:.4f}s")
                return result

            return wrapper

        return decorator


logs = Logging()


def init_logging(cfg: Optional["LogConfig"] = None) -> Logging:
    """
    LogConfig → 全局 logs；cfg 为 None 时保持当前配置
    """
    if cfg is not None:
        logs.configure(cfg.dir, cfg.rotation, cfg.retention, cfg.level)
    return logs
