# metricplot/parallel/executor.py
from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Tuple, TypeVar

from metricplot.parallel.types import ParallelKind
from metricplot import logs

T = TypeVar("T")


class LocalExecutor:
    """
    LocalExecutor（shared bounded thread pool）

    语义：
    - fork-join：调用方阻塞直到所有 block 完成
    - block 之间互不重叠（每个 worker 只写自己的 cell）
    - 任一 block 抛异常 → 原样抛给调用方（不做部分结果）
    """

    def __init__(
            self,
            thread_count: int | None = None,
            min_block_size: int = 1024,
    ):
        self.thread_count = self._resolve_workers(thread_count)
        self.min_block_size = max(1, int(min_block_size))
        self._pool: ThreadPoolExecutor | None = None

    # ---------------- public ----------------

    def parallel_for(
            self,
            begin: int,
            end: int,
            body: Callable[[int, int], None],
            *,
            kind: ParallelKind = ParallelKind.DOCUMENT,
    ) -> None:
        self.map_blocks(begin, end, body, kind=kind)

    def map_blocks(
            self,
            begin: int,
            end: int,
            fn: Callable[[int, int], T],
            *,
            kind: ParallelKind = ParallelKind.DOCUMENT,
    ) -> List[T]:
        """
        fn(lo, hi) over disjoint blocks of [begin, end); results in block order.
        """
        blocks = self._split_range(begin, end)
        if not blocks:
            return []

        if len(blocks) == 1 or self.thread_count == 1:
            return [fn(lo, hi) for lo, hi in blocks]

        logs.debug(
            f"[LocalExecutor] kind={kind.value} range=[{begin}, {end}) "
            f"blocks={len(blocks)} workers={self.thread_count}"
        )

        pool = self._get_pool()
        futures = [pool.submit(fn, lo, hi) for lo, hi in blocks]
        # 按 block 顺序取结果，保证 reduce 顺序确定
        return [fut.result() for fut in futures]

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "LocalExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- internal ----------------

    @staticmethod
    def _resolve_workers(thread_count: int | None) -> int:
        cpu = os.cpu_count() or 1
        if thread_count is None:
            return cpu
        return max(1, int(thread_count))

    def _split_range(self, begin: int, end: int) -> List[Tuple[int, int]]:
        size = end - begin
        if size <= 0:
            return []

        block_count = min(self.thread_count, -(-size // self.min_block_size))
        block_count = max(1, block_count)
        block_size = -(-size // block_count)

        return [
            (lo, min(end, lo + block_size))
            for lo in range(begin, end, block_size)
        ]

    def _get_pool(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(
                max_workers=self.thread_count,
                thread_name_prefix="metricplot",
            )
        return self._pool
