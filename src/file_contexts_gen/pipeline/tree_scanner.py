from pathlib import Path
from typing import List, Iterator, Union
from file_contexts_gen.config import Mode
from file_contexts_gen.utils.logger import get_logger
import os

logger = get_logger(__name__)

BIN_MARKER = "/bin/"

class TreeScanner:
    """
    Walks an extracted partition and yields every entry below its root
    as a posix relative path, tolerating unreadable subtrees.
    """

    def __init__(self, mode: Mode = Mode.ALL):
        self.mode = mode
        self.skipped = 0

    def scan(self, root_path: Union[str, Path]) -> Iterator[str]:
        """
        Scan the partition tree and yield relative paths

        Directories are yielded before their contents; names within one
        directory are visited in sorted order.

        Args:
            root_path: Root of the extracted partition

        Yields:
            Relative paths such as "bin/hw/android.hardware.foo"
        """
        root = Path(root_path)
        if not root.exists():
            logger.error(f"Root path does not exist: {root}")
            return

        logger.info(f"Scanning partition at {root}")
        count = 0

        for root_dir, dirs, files in os.walk(root, onerror=self._on_walk_error, followlinks=False):
            dirs.sort()
            relative_root = Path(root_dir).relative_to(root)

            for name in dirs + sorted(files):
                relative_path = (relative_root / name).as_posix()
                if not self._is_representable(relative_path):
                    continue
                if self._accept(relative_path):
                    count += 1
                    yield relative_path

        logger.info(f"Scan complete. Found {count} entries.")

    def collect(self, root_path: Union[str, Path]) -> List[str]:
        """Materialize one fixed ordered sequence for chunk partitioning"""
        return list(self.scan(root_path))

    def _accept(self, relative_path: str) -> bool:
        if not relative_path or relative_path == ".":
            return False
        if self.mode is Mode.BIN:
            return BIN_MARKER in relative_path
        return True

    def _is_representable(self, relative_path: str) -> bool:
        """Names that are not valid UTF-8 cannot be written to file_contexts"""
        try:
            relative_path.encode('utf-8')
        except UnicodeEncodeError:
            logger.warning(f"Skipping entry with undecodable name: {relative_path!r}")
            self.skipped += 1
            return False
        return True

    def _on_walk_error(self, error: OSError):
        """Skip unreadable entries instead of aborting the walk"""
        logger.warning(f"Error scanning {error.filename}: {error.strerror or error}")
        self.skipped += 1
