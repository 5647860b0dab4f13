"""
src/file_contexts_gen/storage/contexts_store.py
Reads the existing file_contexts index and appends generated entries.
"""
from pathlib import Path
from typing import FrozenSet, Iterable, Union
from file_contexts_gen.utils.logger import get_logger

logger = get_logger(__name__)

class ContextsStore:
    """A file_contexts file used both as dedup index and as output"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_existing(self) -> FrozenSet[str]:
        """
        Collect the first whitespace-delimited field of every line.

        The field is kept verbatim and only used for exact matching. A
        missing file is an empty baseline, blank lines are skipped.
        """
        contexts = set()

        if not self.path.exists():
            logger.debug(f"No existing contexts at {self.path}, starting empty")
            return frozenset()

        with open(self.path, 'r', encoding='utf-8', errors='replace') as f:
            for line in f:
                fields = line.split()
                if fields:
                    contexts.add(fields[0])

        logger.debug(f"Loaded {len(contexts)} existing context keys from {self.path}")
        return frozenset(contexts)

    def append(self, lines: Iterable[str]) -> int:
        """
        Append lines to the contexts file, creating it if needed.

        Lines written before an I/O error stay on disk.

        Returns:
            Number of lines written
        """
        written = 0
        with open(self.path, 'a', encoding='utf-8', newline='\n') as f:
            for line in lines:
                f.write(f"{line}\n")
                written += 1

        logger.info(f"Appended {written} entries to {self.path}")
        return written
