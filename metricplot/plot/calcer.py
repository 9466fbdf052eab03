# metricplot/plot/calcer.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from metricplot import logs
from metricplot.data.pool import Pool
from metricplot.metrics.base import ErrorType, Metric
from metricplot.metrics.holder import StatState
from metricplot.model.base import StagedModel
from metricplot.model.calcer_on_pool import ModelCalcerOnPool
from metricplot.observability.instrumentation import Instrumentation, NoOpInstrumentation
from metricplot.parallel.executor import LocalExecutor
from metricplot.parallel.types import ParallelKind
from metricplot.plot.spill_store import ApproxStore, FileApproxStore, TargetWeightBuffer
from metricplot.report.result import PlotResult
from metricplot.report.writer import save_result
from metricplot.utils.errors import ConfigurationError, InvariantViolation
from metricplot.utils.filesystem import FileSystem

EVAL_TOKEN = "eval_dataset"


class MetricsPlotCalcer:
    """
    MetricsPlotCalcer（FINAL）

    Responsibility:
    - walk [first, last) of the model iteration axis in `step` batches
    - evaluate every metric at every checkpoint:
        checkpoint 0      = zero cursor (iteration `first`)
        checkpoint k      = iterations [first, first + k * step)
        last checkpoint   = iterations [first, last)
    - additive metrics: StatState accumulated inline, per checkpoint
    - non-additive metrics: cursor spilled per checkpoint, evaluated in
      a deferred pass (get_metrics_score)

    Contract:
    - metrics are fixed at construction
    - metric descriptions are unique (they key every result column)
    - proceed_dataset may be called for several consecutive parts of
      one dataset; they must yield the same checkpoint sequence
    - any error aborts the run, no partial trajectory
    """

    def __init__(
            self,
            model: StagedModel,
            executor: LocalExecutor,
            metrics: Sequence[Metric],
            *,
            first: int = 0,
            last: Optional[int] = None,
            step: int = 1,
            tmp_dir: str | Path = "plot_tmp",
            delete_tmp_dir_on_exit: bool = True,
            store: Optional[ApproxStore] = None,
            inst: Optional[Instrumentation] = None,
    ):
        self.model = model
        self.executor = executor
        self.metrics: tuple[Metric, ...] = tuple(metrics)
        names = [m.description for m in self.metrics]
        duplicated = sorted({n for n in names if names.count(n) > 1})
        if duplicated:
            raise ConfigurationError(f"[MetricsPlotCalcer] duplicated metrics: {duplicated}")

        self.first = first
        self.last = model.tree_count if last is None else last
        self.step = step

        self.store: ApproxStore = (
            store if store is not None
            else FileApproxStore(tmp_dir, delete_on_exit=delete_tmp_dir_on_exit)
        )
        self.inst = inst if inst is not None else NoOpInstrumentation()

        # checkpoint ordinal → model iteration
        self.iterations: List[int] = []
        # [metric][checkpoint]
        self.metric_plots: List[List[StatState]] = [[] for _ in self.metrics]

        self._non_additive_ready = False

    # --------------------------------------------------
    # Properties
    # --------------------------------------------------
    def has_non_additive_metric(self) -> bool:
        return any(not m.is_additive() for m in self.metrics)

    def checkpoint_count(self) -> int:
        if self.last <= self.first:
            return 1
        return -(-(self.last - self.first) // self.step) + 1

    # --------------------------------------------------
    # Forward pass
    # --------------------------------------------------
    def proceed_dataset(self, pool: Pool) -> "MetricsPlotCalcer":
        self._ensure_correct_params()

        logs.info(
            f"[MetricsPlotCalcer] proceed dataset docs={pool.doc_count} "
            f"range=[{self.first}, {self.last}) step={self.step} "
            f"metrics={[m.description for m in self.metrics]}"
        )

        total = self.checkpoint_count()
        self.inst.progress.start("checkpoints", total)

        with self.inst.timer("proceed_dataset"):
            scorer = ModelCalcerOnPool(self.model, pool, self.executor)
            cursor = np.zeros((self.model.approx_dimension, pool.doc_count), dtype=np.float64)
            current_iter = self.first
            idx = 0

            for batch_start in range(self.first, self.last, self.step):
                batch_end = min(self.last, batch_start + self.step)

                self._proceed_metrics(cursor, pool, idx, current_iter)
                cursor = self._append(scorer.apply_model_multi(batch_start, batch_end), cursor)

                current_iter = batch_end
                idx += 1
                self.inst.progress.update("checkpoints", idx, total)

            self._proceed_metrics(cursor, pool, idx, current_iter)

        self.inst.progress.done("checkpoints")
        self.inst.metrics.record("checkpoints", len(self.iterations))
        if isinstance(self.store, FileApproxStore):
            self.inst.metrics.record("spill_files", len(self.store.spill_files))
            self.inst.metrics.record("spill_bytes", FileSystem.dir_size(self.store.tmp.path))

        # a new dataset part invalidates the deferred pass
        self._non_additive_ready = False
        return self

    def _ensure_correct_params(self) -> None:
        if self.step <= 0:
            raise ConfigurationError(f"[MetricsPlotCalcer] step must be positive, got {self.step}")
        if self.first < 0:
            raise ConfigurationError(f"[MetricsPlotCalcer] first iteration must be >= 0, got {self.first}")
        if self.last > self.model.tree_count:
            raise ConfigurationError(
                f"[MetricsPlotCalcer] last iteration {self.last} exceeds "
                f"model tree count {self.model.tree_count}"
            )

    def _proceed_metrics(
            self,
            cursor: np.ndarray,
            pool: Pool,
            plot_line_index: int,
            model_iteration: int,
    ) -> None:
        plot_size = plot_line_index + 1

        if len(self.iterations) < plot_size:
            self.iterations.append(model_iteration)
            if len(self.iterations) != plot_size:
                raise InvariantViolation(
                    f"[MetricsPlotCalcer] recorded {len(self.iterations)} iterations, "
                    f"expected {plot_size}"
                )
        elif self.iterations[plot_line_index] != model_iteration:
            raise InvariantViolation(
                f"[MetricsPlotCalcer] checkpoint {plot_line_index} is iteration "
                f"{model_iteration}, previously {self.iterations[plot_line_index]}"
            )

        logs.debug(
            f"[MetricsPlotCalcer] checkpoint={plot_line_index} iteration={model_iteration}"
        )

        for metric_id, metric in enumerate(self.metrics):
            plot = self.metric_plots[metric_id]
            while len(plot) < plot_size:
                plot.append(StatState())

            if metric.is_additive():
                plot[plot_line_index].add(self._compute_metric(metric, pool, cursor))
            elif metric.error_type != ErrorType.PAIRWISE:
                raise ConfigurationError(
                    f"[MetricsPlotCalcer] {metric.description}: non-additive "
                    "per-object metrics are not supported"
                )

        if self.has_non_additive_metric():
            if plot_line_index == 0:
                self.store.capture(pool.target, pool.weight, pool.pairs, pool.pair_weight)
            self.store.write(plot_line_index, cursor)

    def _compute_metric(self, metric: Metric, pool: Pool, approx: np.ndarray) -> StatState:
        if metric.check_target is not None:
            metric.check_target(pool.target)

        if metric.error_type == ErrorType.PER_OBJECT:
            partial = self.executor.map_blocks(
                0,
                pool.doc_count,
                lambda lo, hi: metric.accumulate(approx, pool.target, pool.weight, lo, hi),
                kind=ParallelKind.DOCUMENT,
            )
        else:
            if not pool.has_pairs:
                raise ConfigurationError(
                    f"[MetricsPlotCalcer] pairwise metric {metric.description} "
                    "needs a non-empty pair list"
                )
            partial = self.executor.map_blocks(
                0,
                len(pool.pairs),
                lambda lo, hi: metric.accumulate(approx, pool.pairs, pool.pair_weight, lo, hi),
                kind=ParallelKind.PAIR,
            )

        return StatState.combine(partial)

    def _append(self, approx: np.ndarray, cursor: np.ndarray) -> np.ndarray:
        if approx.shape != cursor.shape:
            raise InvariantViolation(
                f"[MetricsPlotCalcer] batch approx shape {approx.shape} "
                f"!= cursor shape {cursor.shape}"
            )

        def _add_block(lo: int, hi: int) -> None:
            cursor[:, lo:hi] += approx[:, lo:hi]

        self.executor.parallel_for(0, cursor.shape[1], _add_block)
        return cursor

    # --------------------------------------------------
    # Deferred pass
    # --------------------------------------------------
    def compute_non_additive_metrics(self) -> None:
        buffer = self.store.buffer

        with self.inst.timer("non_additive_pass"):
            for idx in range(len(self.iterations)):
                approx = self.store.read(idx, self.model.approx_dimension)
                for metric_id, metric in enumerate(self.metrics):
                    if metric.is_additive():
                        continue
                    self.metric_plots[metric_id][idx] = self._compute_full(metric, buffer, approx)

        self._non_additive_ready = True

    @staticmethod
    def _compute_full(metric: Metric, buffer: TargetWeightBuffer, approx: np.ndarray) -> StatState:
        if metric.error_type != ErrorType.PAIRWISE:
            raise ConfigurationError(
                f"[MetricsPlotCalcer] {metric.description}: non-additive "
                "per-object metrics are not supported"
            )
        if not buffer.has_pairs:
            raise ConfigurationError(
                f"[MetricsPlotCalcer] pairwise metric {metric.description} "
                "needs a non-empty pair list"
            )
        if metric.check_target is not None:
            metric.check_target(buffer.target)

        return metric.evaluate_full(approx, buffer.pairs, buffer.pair_weight)

    # --------------------------------------------------
    # Score table
    # --------------------------------------------------
    def get_metrics_score(self) -> List[List[float]]:
        if not self.iterations:
            raise InvariantViolation("[MetricsPlotCalcer] no dataset was processed")

        if self.has_non_additive_metric() and not self._non_additive_ready:
            self.compute_non_additive_metrics()

        for metric, plot in zip(self.metrics, self.metric_plots):
            if len(plot) != len(self.iterations):
                raise InvariantViolation(
                    f"[MetricsPlotCalcer] {metric.description} has {len(plot)} "
                    f"checkpoints, iterations has {len(self.iterations)}"
                )

        return [
            [metric.get_final_error(state) for state in plot]
            for metric, plot in zip(self.metrics, self.metric_plots)
        ]

    def get_result(self) -> PlotResult:
        scores = self.get_metrics_score()
        return PlotResult(
            token=EVAL_TOKEN,
            iterations=list(self.iterations),
            metric_names=[m.description for m in self.metrics],
            higher_is_better=[m.higher_is_better for m in self.metrics],
            scores=scores,
            partial_stats=[[s.stats.tolist() for s in plot] for plot in self.metric_plots],
        )

    def save_result(
            self,
            result_dir: str | Path,
            metrics_file: str = "eval_metrics.tsv",
            *,
            plot_curve: bool = False,
    ) -> "MetricsPlotCalcer":
        # scores first: a failing run writes nothing
        result = self.get_result()
        save_result(result, result_dir, metrics_file=metrics_file, plot_curve=plot_curve)
        return self

    # --------------------------------------------------
    # Lifetime
    # --------------------------------------------------
    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "MetricsPlotCalcer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
