# metricplot/plot/spill_store.py
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from metricplot import logs
from metricplot.utils.errors import ResourceError
from metricplot.utils.filesystem import FileSystem

# one record = one document, dimension-ordered float64, little-endian
RECORD_DTYPE = np.dtype("<f8")


@dataclass
class TargetWeightBuffer:
    """
    Targets / weights / pairs of every document ever spilled.

    Captured once per dataset (at its checkpoint 0), reused by every
    deferred evaluation. Pair indices are global across appended datasets.
    """

    target: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    weight: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    pairs: np.ndarray = field(default_factory=lambda: np.zeros((0, 2), dtype=np.int64))
    pair_weight: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))

    @property
    def doc_count(self) -> int:
        return int(self.target.size)

    @property
    def has_pairs(self) -> bool:
        return len(self.pairs) > 0

    def append(
            self,
            target: np.ndarray,
            weight: np.ndarray,
            pairs: Optional[np.ndarray] = None,
            pair_weight: Optional[np.ndarray] = None,
    ) -> None:
        offset = self.doc_count
        self.target = np.concatenate([self.target, np.asarray(target, dtype=np.float64)])
        self.weight = np.concatenate([self.weight, np.asarray(weight, dtype=np.float64)])

        if pairs is not None and len(pairs):
            pairs = np.asarray(pairs, dtype=np.int64).reshape(-1, 2) + offset
            if pair_weight is None:
                pair_weight = np.ones(len(pairs), dtype=np.float64)
            self.pairs = np.concatenate([self.pairs, pairs])
            self.pair_weight = np.concatenate(
                [self.pair_weight, np.asarray(pair_weight, dtype=np.float64)]
            )


class ScopedTmpDir:
    """
    Single ownership handle over the spill directory.

    - acquire(): create lazily, remember whether WE created it
    - release(): remove the directory only if we created it,
      otherwise remove only the given files
    """

    def __init__(self, path: str | Path, *, delete_on_exit: bool = True):
        self.path = Path(path)
        self.delete_on_exit = delete_on_exit
        self._created = False

    @property
    def created(self) -> bool:
        return self._created

    def acquire(self) -> Path:
        if self.path.exists():
            if not self.path.is_dir():
                raise ResourceError(f"[SpillStore] tmp path is not a directory: {self.path}")
            return self.path

        try:
            self.path.mkdir(parents=True)
        except OSError as e:
            raise ResourceError(f"[SpillStore] cannot create tmp dir {self.path}: {e}") from e

        self._created = True
        logs.info(f"[SpillStore] created tmp dir {self.path}")
        return self.path

    def release(self, files: List[Path]) -> None:
        if not self.delete_on_exit:
            return

        if self._created:
            FileSystem.remove(self.path)
            self._created = False
            logs.info(f"[SpillStore] removed tmp dir {self.path}")
            return

        removed = FileSystem.remove_all(files)
        logs.debug(f"[SpillStore] removed {removed} spill files from {self.path}")


class ApproxStore(ABC):
    """
    Checkpoint ordinal → full prediction snapshot.

    write() appends the documents of one dataset to the checkpoint's
    snapshot; read() returns exactly buffer.doc_count documents.
    """

    def __init__(self):
        self.buffer = TargetWeightBuffer()

    def capture(self, target, weight, pairs=None, pair_weight=None) -> None:
        self.buffer.append(target, weight, pairs, pair_weight)

    @abstractmethod
    def write(self, plot_line_index: int, approx: np.ndarray) -> None:
        ...

    @abstractmethod
    def read(self, plot_line_index: int, dimension: int) -> np.ndarray:
        ...

    def close(self) -> None:
        pass


class FileApproxStore(ApproxStore):
    """
    One flat binary file per checkpoint under a scoped tmp dir:
        <tmp_dir>/<run_id>_approx_<ordinal>.tmp
    """

    def __init__(
            self,
            tmp_dir: str | Path,
            *,
            run_id: str | None = None,
            delete_on_exit: bool = True,
    ):
        super().__init__()
        self.tmp = ScopedTmpDir(tmp_dir, delete_on_exit=delete_on_exit)
        self.run_id = run_id or uuid.uuid4().hex
        self._files: List[Optional[Path]] = []

    @property
    def spill_files(self) -> List[Path]:
        return [f for f in self._files if f is not None]

    def file_name(self, plot_line_index: int) -> Path:
        plot_size = plot_line_index + 1
        if len(self._files) < plot_size:
            self._files.extend([None] * (plot_size - len(self._files)))

        if self._files[plot_line_index] is None:
            tmp_dir = self.tmp.acquire()
            path = tmp_dir / f"{self.run_id}_approx_{plot_line_index}.tmp"
            if path.exists():
                logs.warning(f"[SpillStore] path already exists {path}, will overwrite file")
                FileSystem.remove(path)
            self._files[plot_line_index] = path

        return self._files[plot_line_index]

    def write(self, plot_line_index: int, approx: np.ndarray) -> None:
        path = self.file_name(plot_line_index)
        # [dim][doc] → [doc][dim] records
        records = np.ascontiguousarray(np.asarray(approx).T, dtype=RECORD_DTYPE)
        try:
            with open(path, "ab") as f:
                records.tofile(f)
        except OSError as e:
            raise ResourceError(f"[SpillStore] cannot write {path}: {e}") from e

    def read(self, plot_line_index: int, dimension: int) -> np.ndarray:
        if plot_line_index >= len(self._files) or self._files[plot_line_index] is None:
            raise ResourceError(
                f"[SpillStore] checkpoint {plot_line_index} was never written"
            )

        path = self._files[plot_line_index]
        doc_count = self.buffer.doc_count
        expected = doc_count * dimension

        try:
            data = np.fromfile(path, dtype=RECORD_DTYPE, count=expected)
        except OSError as e:
            raise ResourceError(f"[SpillStore] cannot read {path}: {e}") from e

        if data.size != expected:
            raise ResourceError(
                f"[SpillStore] {path} is truncated: "
                f"expected {expected} values, got {data.size}"
            )

        return data.reshape(doc_count, dimension).T.astype(np.float64)

    def close(self) -> None:
        self.tmp.release(self.spill_files)
        self._files = []


class MemoryApproxStore(ApproxStore):
    """
    In-memory substitute with the same write/read contract (tests, small pools).
    """

    def __init__(self):
        super().__init__()
        self._snapshots: Dict[int, List[np.ndarray]] = {}

    def write(self, plot_line_index: int, approx: np.ndarray) -> None:
        self._snapshots.setdefault(plot_line_index, []).append(
            np.array(approx, dtype=np.float64, copy=True)
        )

    def read(self, plot_line_index: int, dimension: int) -> np.ndarray:
        if plot_line_index not in self._snapshots:
            raise ResourceError(
                f"[SpillStore] checkpoint {plot_line_index} was never written"
            )

        approx = np.concatenate(self._snapshots[plot_line_index], axis=1)
        if approx.shape != (dimension, self.buffer.doc_count):
            raise ResourceError(
                f"[SpillStore] snapshot {plot_line_index} has shape {approx.shape}, "
                f"expected {(dimension, self.buffer.doc_count)}"
            )
        return approx

    def close(self) -> None:
        self._snapshots.clear()
