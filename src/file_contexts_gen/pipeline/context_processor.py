"""
Parallel file_contexts generation pipeline
Collect -> pre-count -> partition -> classify per chunk -> append in chunk order
"""

import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import FrozenSet, List, Sequence, TypeVar

import click

from file_contexts_gen.classifiers.context_classifier import ContextClassifier
from file_contexts_gen.config import FilesystemType, GeneratorConfig
from file_contexts_gen.pipeline.tree_scanner import TreeScanner
from file_contexts_gen.storage.contexts_store import ContextsStore
from file_contexts_gen.utils.logger import get_logger, log_execution_time
from file_contexts_gen.utils.progress import ProgressTracker
from file_contexts_gen.utils.regex_utils import escape_regex

logger = get_logger(__name__)

T = TypeVar('T')

class ContextGenerationError(RuntimeError):
    """A worker failed while classifying its chunk"""

@dataclass(frozen=True)
class CandidateEntry:
    """Lookup keys a path may already be registered under"""
    escaped_path: str
    full_key: str
    folder_key: str

    @classmethod
    def build(cls, relative_path: str, partition: str, fstype: FilesystemType) -> 'CandidateEntry':
        escaped_path = escape_regex(relative_path)
        return cls(
            escaped_path=escaped_path,
            full_key=f"/{partition}/{escaped_path} ".strip(),
            folder_key=f"/{partition}/{escaped_path}{fstype.folder_pattern()} ".strip(),
        )

    def is_missing(self, existing: FrozenSet[str]) -> bool:
        return self.full_key not in existing and self.folder_key not in existing

@dataclass
class ProcessingStatistics:
    """Outcome of one generator run"""
    total_paths: int = 0
    missing_entries: int = 0
    written_entries: int = 0
    chunks: int = 0
    processing_time: float = 0.0

def partition_chunks(items: Sequence[T], count: int) -> List[List[T]]:
    """
    Split items into at most `count` contiguous chunks of ceil(len/count)

    The last chunk may be shorter; no items means no chunks.
    """
    if count < 1:
        raise ValueError(f"Chunk count must be positive, got {count}")
    if not items:
        return []

    chunk_size = math.ceil(len(items) / count)
    return [list(items[i:i + chunk_size]) for i in range(0, len(items), chunk_size)]

def count_missing_entries(paths: Sequence[str],
                          partition: str,
                          fstype: FilesystemType,
                          existing: FrozenSet[str]) -> int:
    """Count paths with neither key in the existing set"""
    missing = 0
    for relative_path in paths:
        if not relative_path:
            continue
        if CandidateEntry.build(relative_path, partition, fstype).is_missing(existing):
            missing += 1
    return missing

class ContextProcessor:
    """
    Generates missing file_contexts entries for one extracted partition

    Workers each own one static chunk and return an ordered batch; only the
    orchestrating thread touches the output file, after all workers joined.
    """

    def __init__(self, config: GeneratorConfig):
        """
        Initialize the processor

        Args:
            config: Validated generator configuration
        """
        self.config = config
        self.partition = config.partition_name
        self.scanner = TreeScanner(config.mode)
        self.store = ContextsStore(config.file_contexts)
        self.classifier = ContextClassifier(self.partition, config.fstype)
        self.statistics = ProcessingStatistics()

    @log_execution_time()
    def run(self) -> ProcessingStatistics:
        """Run the pipeline once and return its statistics"""
        start_time = time.time()
        config = self.config
        self.statistics = ProcessingStatistics()

        existing = self.store.load_existing()
        paths = self.scanner.collect(config.extracted_dir)
        total = len(paths)
        missing = count_missing_entries(paths, self.partition, config.fstype, existing)

        self.statistics.total_paths = total
        self.statistics.missing_entries = missing
        logger.info(f"Partition '{self.partition}': {total} paths, {missing} missing entries")

        if missing == 0:
            if not config.silent:
                click.echo(f"No missing entries found in {config.mode.description}.")
                click.echo()
            self.statistics.processing_time = time.time() - start_time
            return self.statistics

        if not config.silent:
            click.echo(f"{missing} missing entries detected in {config.mode.description}, autogenerating...")

        progress = ProgressTracker(total, show_progress=not config.silent)
        chunks = partition_chunks(paths, config.threads)
        self.statistics.chunks = len(chunks)

        try:
            batches = self._dispatch(chunks, existing, progress)
            lines = [line for batch in batches for line in batch]
            self.statistics.written_entries = self.store.append(lines)
        except Exception:
            progress.abort()
            raise

        progress.finish()
        if not config.silent:
            click.echo()

        self.statistics.processing_time = time.time() - start_time
        return self.statistics

    def _dispatch(self,
                  chunks: List[List[str]],
                  existing: FrozenSet[str],
                  progress: ProgressTracker) -> List[List[str]]:
        """Classify every chunk on its own worker and return batches in chunk order"""
        logger.debug(f"Dispatching {len(chunks)} chunks on {self.config.threads} threads")

        with ThreadPoolExecutor(max_workers=self.config.threads,
                                thread_name_prefix="contexts-worker") as executor:
            futures = [
                executor.submit(self._process_chunk, chunk, existing, progress)
                for chunk in chunks
            ]
        # Leaving the executor block joins every worker

        batches = []
        first_failure = None
        for index, future in enumerate(futures):
            error = future.exception()
            if error is not None:
                logger.debug(f"Worker for chunk {index} failed: {error}")
                if first_failure is None:
                    first_failure = (index, error)
                continue
            batches.append(future.result())

        if first_failure is not None:
            index, error = first_failure
            raise ContextGenerationError(f"Failed to process chunk {index}: {error}") from error

        return batches

    def _process_chunk(self,
                       chunk: List[str],
                       existing: FrozenSet[str],
                       progress: ProgressTracker) -> List[str]:
        """Classify the missing paths of one chunk, preserving its order"""
        results = []
        for relative_path in chunk:
            if not relative_path:
                progress.increment()
                continue

            candidate = CandidateEntry.build(relative_path, self.partition, self.config.fstype)
            if candidate.is_missing(existing):
                full_path = self.config.extracted_dir / relative_path
                is_dir = not full_path.is_file()
                results.append(self.classifier.classify(candidate.escaped_path, is_dir))

            progress.increment()
        return results

def process_file_contexts(config: GeneratorConfig) -> ProcessingStatistics:
    """Generate and append the missing entries described by `config`"""
    return ContextProcessor(config).run()
