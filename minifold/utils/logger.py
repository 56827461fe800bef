"""
Application logger for minifold.

A process-wide singleton writes short messages to the console and, when
configured, detailed records (with module:function:line) to a log file.
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


# NOTICE sits between INFO and WARNING (RFC 5424 severity 5)
NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")


# ============================================================================
# Formatters
# ============================================================================


class DetailedFormatter(logging.Formatter):
    """Formatter with location tracking (module:function:line)."""

    def format(self, record: logging.LogRecord) -> str:
        record.location = f"{record.module}:{record.funcName}:{record.lineno}"
        return super().format(record)


# ============================================================================
# Singleton Logger
# ============================================================================


class MinifoldLogger:
    """
    Thread-safe singleton logger for minifold.

    Console output goes to stderr so it never mixes with minified text
    printed on stdout. File output is optional and may rotate by size.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if getattr(self, "_initialized", False):
            return

        self._initialized = True
        self._logger = logging.getLogger("minifold")
        self._logger.setLevel(logging.WARNING)
        self._logger.propagate = False
        self._console_handler: Optional[logging.Handler] = None
        self._file_handler: Optional[logging.Handler] = None

    def configure(
        self,
        log_level: str = "WARNING",
        enable_console: bool = True,
        log_file: Optional[str] = None,
        max_bytes: int = 0,
        backup_count: int = 3,
    ) -> None:
        """
        Configure the logger with specified settings.

        Args:
            log_level: Logging level name (DEBUG, INFO, NOTICE, WARNING, ERROR, CRITICAL)
            enable_console: Enable console output on stderr
            log_file: Path of a log file, or None to disable file output
            max_bytes: Rotate the log file at this size (0 disables rotation)
            backup_count: Number of rotated files to keep
        """
        self._cleanup_handlers()

        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Invalid log level: {log_level}")
        self._logger.setLevel(level)

        if enable_console:
            self._console_handler = logging.StreamHandler(sys.stderr)
            self._console_handler.setLevel(level)
            self._console_handler.setFormatter(logging.Formatter(fmt="%(message)s"))
            self._logger.addHandler(self._console_handler)

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            if max_bytes > 0:
                self._file_handler = RotatingFileHandler(
                    log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8", delay=True
                )
            else:
                self._file_handler = logging.FileHandler(log_path, encoding="utf-8", delay=True)
            self._file_handler.setLevel(logging.DEBUG)
            self._file_handler.setFormatter(
                DetailedFormatter(
                    fmt="%(asctime)s [%(levelname)s] [%(location)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
                )
            )
            self._logger.addHandler(self._file_handler)
            # The file captures debug records even when the console is quieter
            self._logger.setLevel(logging.DEBUG)

    def get_logger(self) -> logging.Logger:
        """Get the underlying logger instance."""
        return self._logger

    def _cleanup_handlers(self) -> None:
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)
        self._console_handler = None
        self._file_handler = None

    def critical(self, msg: str, *args, **kwargs) -> None:
        self._logger.critical(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def notice(self, msg: str, *args, **kwargs) -> None:
        """Log a normal but significant condition."""
        self._logger.log(NOTICE, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)


def get_logger() -> MinifoldLogger:
    """
    Get the global MinifoldLogger instance.

    Returns:
        Singleton MinifoldLogger instance
    """
    return MinifoldLogger()
