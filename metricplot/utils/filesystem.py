#!filepath: metricplot/utils/filesystem.py
import shutil
from pathlib import Path
from typing import Iterable

from metricplot import logs


class FileSystem:
    """
    result_dir / spill tmp dir 用到的文件操作
    - ensure_dir: 结果目录按需创建
    - remove / remove_all: spill 目录与 snapshot 文件清理（不存在则跳过）
    - dir_size: spill 占用字节数
    """

    @staticmethod
    def ensure_dir(path: str | Path) -> Path:
        p = Path(path)
        if not p.is_dir():
            p.mkdir(parents=True, exist_ok=True)
            logs.debug(f"[FS] mkdir {p}")
        return p

    @staticmethod
    def remove(path: str | Path) -> bool:
        """
        删除文件或整个目录树；返回是否真的删除了东西
        """
        p = Path(path)
        if p.is_dir():
            shutil.rmtree(p)
        elif p.exists():
            p.unlink()
        else:
            return False

        logs.debug(f"[FS] removed {p}")
        return True

    @staticmethod
    def remove_all(paths: Iterable[Path]) -> int:
        return sum(FileSystem.remove(p) for p in paths)

    @staticmethod
    def dir_size(path: str | Path) -> int:
        p = Path(path)
        if not p.is_dir():
            return 0
        return sum(f.stat().st_size for f in p.rglob("*") if f.is_file())
