"""Unit tests for the parallel processing pipeline"""
import logging
import time

import pytest

from file_contexts_gen.config import FilesystemType, GeneratorConfig, Mode
from file_contexts_gen.pipeline.context_processor import (
    CandidateEntry,
    ContextGenerationError,
    ContextProcessor,
    count_missing_entries,
    partition_chunks,
)

def make_config(root, contexts, threads=2, fstype=FilesystemType.EXT4, mode=Mode.ALL, silent=True):
    return GeneratorConfig(
        mode=mode,
        fstype=fstype,
        extracted_dir=root,
        file_contexts=contexts,
        threads=threads,
        silent=silent,
    )

@pytest.mark.parametrize("total,threads,sizes", [
    (10, 3, [4, 4, 2]),
    (9, 3, [3, 3, 3]),
    (2, 4, [1, 1]),
    (5, 1, [5]),
    (7, 7, [1] * 7),
])
def test_partition_chunks_sizes(total, threads, sizes):
    items = [f"path{i}" for i in range(total)]
    chunks = partition_chunks(items, threads)

    assert [len(chunk) for chunk in chunks] == sizes
    assert len(chunks) <= threads
    assert [item for chunk in chunks for item in chunk] == items

def test_partition_chunks_empty():
    assert partition_chunks([], 4) == []

def test_partition_chunks_rejects_zero():
    with pytest.raises(ValueError):
        partition_chunks(["a"], 0)

def test_candidate_entry_keys():
    candidate = CandidateEntry.build("etc/vold.rc", "vendor", FilesystemType.EXT4)

    assert candidate.escaped_path == r"etc/vold\.rc"
    assert candidate.full_key == r"/vendor/etc/vold\.rc"
    assert candidate.folder_key == r"/vendor/etc/vold\.rc(/.*)?"

def test_candidate_missing_checks_both_keys():
    candidate = CandidateEntry.build("firmware", "vendor", FilesystemType.EXT4)

    assert candidate.is_missing(frozenset())
    assert not candidate.is_missing(frozenset({"/vendor/firmware"}))
    assert not candidate.is_missing(frozenset({"/vendor/firmware(/.*)?"}))

def test_count_missing_entries():
    existing = frozenset({"/vendor/etc(/.*)?", r"/vendor/build\.prop"})
    paths = ["etc", "build.prop", "firmware", ""]

    assert count_missing_entries(paths, "vendor", FilesystemType.EXT4, existing) == 1

def test_process_chunk_preserves_order_and_counts_progress(vendor_tree, tmp_path):
    processor = ContextProcessor(make_config(vendor_tree, tmp_path / "fc"))

    class Counter:
        calls = 0

        def increment(self, value=1):
            self.calls += value

    counter = Counter()
    existing = frozenset({"/vendor/etc(/.*)?"})
    results = processor._process_chunk(["firmware/a.bin", "etc", "bin/hw"], existing, counter)

    assert results == [
        r"/vendor/firmware/a\.bin u:object_r:vendor_firmware_file:s0",
        "/vendor/bin/hw(/.*)? u:object_r:vendor_file:s0",
    ]
    assert counter.calls == 3

def test_worker_failure_is_raised_after_join(vendor_tree, tmp_path, monkeypatch):
    contexts = tmp_path / "fc"
    processor = ContextProcessor(make_config(vendor_tree, contexts, threads=3))
    classify = processor.classifier.classify

    def failing_classify(escaped_path, is_dir):
        if escaped_path.startswith("etc/init"):
            raise OSError("disk went away")
        return classify(escaped_path, is_dir)

    monkeypatch.setattr(processor.classifier, "classify", failing_classify)

    with pytest.raises(ContextGenerationError) as excinfo:
        processor.run()

    assert isinstance(excinfo.value.__cause__, OSError)
    assert not contexts.exists()

def test_write_failure_propagates(vendor_tree, tmp_path, monkeypatch):
    processor = ContextProcessor(make_config(vendor_tree, tmp_path / "fc"))

    def failing_append(lines):
        raise OSError("No space left on device")

    monkeypatch.setattr(processor.store, "append", failing_append)

    with pytest.raises(OSError, match="No space left"):
        processor.run()

def test_statistics(vendor_tree, tmp_path):
    stats = ContextProcessor(make_config(vendor_tree, tmp_path / "fc", threads=3)).run()

    assert stats.total_paths == 8
    assert stats.missing_entries == 8
    assert stats.written_entries == 8
    assert stats.chunks == 3

def test_worker_failure_is_logged_once(vendor_tree, tmp_path, monkeypatch):
    processor = ContextProcessor(make_config(vendor_tree, tmp_path / "fc", threads=3))
    classify = processor.classifier.classify

    def failing_classify(escaped_path, is_dir):
        if escaped_path.startswith("etc/init"):
            raise OSError("disk went away")
        return classify(escaped_path, is_dir)

    monkeypatch.setattr(processor.classifier, "classify", failing_classify)

    records = []
    handler = logging.Handler(level=logging.ERROR)
    handler.emit = records.append
    package_logger = logging.getLogger("file_contexts_gen")
    package_logger.addHandler(handler)
    try:
        with pytest.raises(ContextGenerationError):
            processor.run()
    finally:
        package_logger.removeHandler(handler)

    # "etc/init" and "etc/init/vold.rc" fail in two different chunks
    assert len(records) == 1
    assert "disk went away" in records[0].getMessage()

def test_failure_ends_progress_line(vendor_tree, tmp_path, monkeypatch, capsys):
    processor = ContextProcessor(make_config(vendor_tree, tmp_path / "fc", silent=False))
    classify = processor.classifier.classify

    def slow_failing_classify(escaped_path, is_dir):
        if escaped_path == "etc/init/vold\\.rc":
            time.sleep(0.5)
            raise OSError("disk went away")
        return classify(escaped_path, is_dir)

    monkeypatch.setattr(processor.classifier, "classify", slow_failing_classify)

    with pytest.raises(ContextGenerationError):
        processor.run()

    out = capsys.readouterr().out
    assert "% (" in out
    assert out.endswith("\n")
    assert not out.endswith("\n\n")
