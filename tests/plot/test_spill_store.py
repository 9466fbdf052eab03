# tests/plot/test_spill_store.py
from __future__ import annotations

import numpy as np
import pytest

from metricplot.plot.spill_store import (
    FileApproxStore,
    MemoryApproxStore,
    ScopedTmpDir,
    TargetWeightBuffer,
)
from metricplot.utils.errors import ResourceError


@pytest.fixture
def approx() -> np.ndarray:
    rng = np.random.default_rng(3)
    # values that do not survive a text round-trip
    return rng.normal(size=(3, 17)) * np.array([[1e-300], [1.0], [1e300]])


def _store_with_docs(store, doc_count: int):
    store.capture(np.zeros(doc_count), np.ones(doc_count))
    return store


def test_file_round_trip_is_lossless(tmp_path, approx):
    store = _store_with_docs(FileApproxStore(tmp_path / "spill"), approx.shape[1])
    store.write(0, approx)
    store.write(1, approx * 2)

    assert np.array_equal(store.read(0, 3), approx)
    assert np.array_equal(store.read(1, 3), approx * 2)
    store.close()


def test_file_layout_is_document_major(tmp_path):
    store = _store_with_docs(FileApproxStore(tmp_path / "spill", run_id="run"), 2)
    store.write(0, np.array([[1.0, 2.0], [10.0, 20.0]]))

    raw = np.fromfile(tmp_path / "spill" / "run_approx_0.tmp", dtype="<f8")
    assert raw.tolist() == [1.0, 10.0, 2.0, 20.0]
    store.close()


def test_tmp_dir_is_created_lazily_and_removed(tmp_path, approx):
    spill = tmp_path / "spill"
    store = _store_with_docs(FileApproxStore(spill), approx.shape[1])
    assert not spill.exists()

    store.write(0, approx)
    assert spill.is_dir()
    assert len(store.spill_files) == 1

    store.close()
    assert not spill.exists()


def test_pre_existing_tmp_dir_is_kept_but_spill_files_removed(tmp_path, approx):
    spill = tmp_path / "spill"
    spill.mkdir()
    (spill / "keep.txt").write_text("x")

    store = _store_with_docs(FileApproxStore(spill), approx.shape[1])
    store.write(0, approx)
    store.close()

    assert spill.exists()
    assert [p.name for p in spill.iterdir()] == ["keep.txt"]


def test_delete_on_exit_false_leaves_files(tmp_path, approx):
    spill = tmp_path / "spill"
    store = _store_with_docs(FileApproxStore(spill, delete_on_exit=False), approx.shape[1])
    store.write(0, approx)
    store.close()

    assert len(list(spill.iterdir())) == 1


def test_existing_snapshot_file_is_overwritten_with_warning(tmp_path, approx, log_capture):
    spill = tmp_path / "spill"
    spill.mkdir()
    (spill / "run_approx_0.tmp").write_bytes(b"stale-bytes")

    store = _store_with_docs(FileApproxStore(spill, run_id="run"), approx.shape[1])
    store.write(0, approx)

    assert np.array_equal(store.read(0, 3), approx)
    assert any("already exists" in line for line in log_capture)
    store.close()


def test_read_never_written_checkpoint_is_resource_error(tmp_path, approx):
    store = _store_with_docs(FileApproxStore(tmp_path / "spill"), approx.shape[1])
    store.write(0, approx)

    with pytest.raises(ResourceError, match="never written"):
        store.read(5, 3)
    store.close()


def test_truncated_snapshot_is_resource_error(tmp_path, approx):
    store = _store_with_docs(FileApproxStore(tmp_path / "spill"), approx.shape[1] + 1)
    store.write(0, approx)

    with pytest.raises(ResourceError, match="truncated"):
        store.read(0, 3)
    store.close()


def test_tmp_dir_that_cannot_be_created_is_resource_error(tmp_path):
    blocker = tmp_path / "file.txt"
    blocker.write_text("x")

    with pytest.raises(ResourceError):
        ScopedTmpDir(blocker / "sub").acquire()
    with pytest.raises(ResourceError):
        ScopedTmpDir(blocker).acquire()


def test_appended_datasets_read_back_concatenated(tmp_path):
    store = FileApproxStore(tmp_path / "spill")
    store.capture(np.zeros(2), np.ones(2))
    store.write(0, np.array([[1.0, 2.0]]))
    store.capture(np.zeros(3), np.ones(3))
    store.write(0, np.array([[3.0, 4.0, 5.0]]))

    assert store.read(0, 1).tolist() == [[1.0, 2.0, 3.0, 4.0, 5.0]]
    store.close()


def test_memory_store_has_same_contract(approx):
    store = _store_with_docs(MemoryApproxStore(), approx.shape[1])
    store.write(0, approx)

    assert np.array_equal(store.read(0, 3), approx)
    with pytest.raises(ResourceError):
        store.read(1, 3)


def test_buffer_shifts_pairs_of_appended_datasets():
    buffer = TargetWeightBuffer()
    buffer.append(np.zeros(3), np.ones(3), np.array([[0, 1]]))
    buffer.append(np.zeros(2), np.ones(2), np.array([[1, 0]]), np.array([2.0]))

    assert buffer.doc_count == 5
    assert buffer.pairs.tolist() == [[0, 1], [4, 3]]
    assert buffer.pair_weight.tolist() == [1.0, 2.0]
