# config.py
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_THREADS = 4

class ConfigurationError(ValueError):
    """Raised when the generator configuration is invalid"""

class Settings:
    """Application settings from environment variables"""

    # Core
    ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING').upper()
    LOG_FILE = os.getenv('FCGEN_LOG_FILE')

    # Processing, raw value; see default_threads()
    THREADS = os.getenv('FCGEN_THREADS')

    @classmethod
    def default_threads(cls) -> int:
        """Worker count from FCGEN_THREADS, or DEFAULT_THREADS when unset"""
        if cls.THREADS is None or not cls.THREADS.strip():
            return DEFAULT_THREADS
        try:
            return int(cls.THREADS)
        except ValueError:
            raise ConfigurationError(f"Invalid FCGEN_THREADS value: {cls.THREADS}") from None

class Mode(Enum):
    """Which entries to autogenerate"""
    ALL = "all"
    BIN = "bin"

    @property
    def description(self) -> str:
        """Human readable target used in console summaries"""
        return "/bin/ file_contexts" if self is Mode.BIN else "file_contexts"

class FilesystemType(Enum):
    """Filesystem of the extracted partition image"""
    EXT4 = "ext4"
    EROFS = "erofs"
    F2FS = "f2fs"

    @classmethod
    def parse(cls, value: str) -> 'FilesystemType':
        """Parse a filesystem name case-insensitively"""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unsupported filesystem type: {value}") from None

    def folder_pattern(self) -> str:
        """Regex suffix appended to directory entries.

        ext4 contexts must match descendants explicitly, erofs and f2fs
        directory entries are written bare.
        """
        if self is FilesystemType.EXT4:
            return "(/.*)?"
        return ""

@dataclass(frozen=True)
class GeneratorConfig:
    """Validated configuration for one generator run"""
    mode: Mode
    fstype: FilesystemType
    extracted_dir: Path
    file_contexts: Path
    threads: int = DEFAULT_THREADS
    silent: bool = False

    @classmethod
    def create(cls,
               mode: Mode,
               fstype: str,
               extracted_dir: str,
               file_contexts: str,
               threads: Optional[int] = None,
               silent: bool = False) -> 'GeneratorConfig':
        """Build and validate a configuration from raw option values"""
        if threads is None:
            threads = Settings.default_threads()

        config = cls(
            mode=mode,
            fstype=FilesystemType.parse(fstype),
            extracted_dir=Path(extracted_dir),
            file_contexts=Path(file_contexts),
            threads=threads,
            silent=silent,
        )
        config.validate()
        return config

    def validate(self) -> bool:
        """Fail fast before any scanning begins"""
        if isinstance(self.threads, bool) or not isinstance(self.threads, int) or self.threads < 1:
            raise ConfigurationError(f"Invalid thread count: {self.threads}")

        if not self.extracted_dir.exists():
            raise ConfigurationError(f"Partition directory does not exist: {self.extracted_dir}")

        return True

    @property
    def partition_name(self) -> str:
        """Partition name is the basename of the extracted directory"""
        name = self.extracted_dir.name
        if name in ("", ".", ".."):
            return "unknown"
        return name
