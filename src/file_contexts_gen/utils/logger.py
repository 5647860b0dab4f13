"""
Logging configuration for the file_contexts generator
Console output goes to stderr so the summary and progress bar on stdout stay clean
"""

import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Optional
from functools import wraps
import time

import colorlog

from file_contexts_gen.config import Settings

ENV = Settings.ENVIRONMENT
LOG_LEVEL = Settings.LOG_LEVEL
LOG_FILE = Settings.LOG_FILE

ROOT_LOGGER_NAME = "file_contexts_gen"

class ColoredFormatter(colorlog.ColoredFormatter):
    """Colored formatter for console output"""

    def __init__(self):
        super().__init__(
            fmt='%(log_color)s%(asctime)s - %(name)s - %(levelname)s - %(message)s%(reset)s',
            datefmt='%H:%M:%S',
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )

class DetailedFormatter(logging.Formatter):
    """Detailed formatter for file logs"""

    FORMATS = {
        logging.DEBUG: '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s',
        logging.INFO: '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        logging.WARNING: '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        logging.ERROR: '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s',
        logging.CRITICAL: '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s'
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format based on log level"""
        log_fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        formatter = logging.Formatter(log_fmt, datefmt='%Y-%m-%d %H:%M:%S')
        return formatter.format(record)

class LoggerManager:
    """Centralized logger management"""

    _instance = None
    _loggers: Dict[str, logging.Logger] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.console_handler = None
        self.file_handler = None
        self.setup_package_logger()
        self.setup_handlers()

    def setup_package_logger(self):
        """Configure the package logger without touching the root logger"""
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.setLevel(logging.DEBUG)  # Capture all, filter at handler level
        package_logger.propagate = False
        package_logger.handlers = []

    def setup_handlers(self):
        """Setup console and optional file handlers"""
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)

        self.console_handler = self._create_console_handler()
        package_logger.addHandler(self.console_handler)

        if LOG_FILE:
            self.file_handler = self._create_rotating_handler(Path(LOG_FILE))
            package_logger.addHandler(self.file_handler)

    def _create_console_handler(self) -> logging.Handler:
        """Create console handler with colored output"""
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(getattr(logging, LOG_LEVEL, logging.WARNING))

        if ENV == 'development':
            handler.setFormatter(ColoredFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%H:%M:%S'
            ))

        return handler

    def _create_rotating_handler(self, log_file: Path) -> logging.Handler:
        """Create rotating file handler"""
        log_file.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(DetailedFormatter())

        return handler

    def set_console_level(self, level: str):
        """Change console verbosity at runtime"""
        if self.console_handler:
            self.console_handler.setLevel(getattr(logging, level.upper(), logging.WARNING))

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create a logger with the given name"""
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"

        if name not in self._loggers:
            logger = logging.getLogger(name)
            self._loggers[name] = logger

        return self._loggers[name]

# Singleton instance
logger_manager = LoggerManager()

def get_logger(name: str) -> logging.Logger:
    """Get a logger instance"""
    return logger_manager.get_logger(name)

def set_console_level(level: str):
    """Set the console handler level (e.g. DEBUG for --verbose)"""
    logger_manager.set_console_level(level)

# Decorators for logging

def log_execution_time(logger: Optional[logging.Logger] = None):
    """Decorator to log function execution time"""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            nonlocal logger
            if logger is None:
                logger = get_logger(func.__module__)

            start_time = time.time()
            logger.debug(f"Starting {func.__name__}")

            try:
                result = func(*args, **kwargs)
                execution_time = time.time() - start_time

                logger.info(
                    f"Completed {func.__name__} in {execution_time:.2f}s",
                    extra={'duration': execution_time}
                )

                return result
            except Exception as e:
                execution_time = time.time() - start_time
                logger.error(
                    f"Failed {func.__name__} after {execution_time:.2f}s: {str(e)}",
                    extra={'duration': execution_time}
                )
                raise

        return wrapper
    return decorator
