"""
TagFlow Logging Module

This module provides the centralized logger used across TagFlow. It implements
a singleton that always reports errors to stderr and can additionally write a
timestamped log file for a render run.

Key Features:
- Singleton pattern for consistent logging across the application
- Optional file logging with automatic log file creation
- Custom formatter with microsecond timestamps
- Redaction of protected configuration values before they reach any handler

Usage:
    from tagflow.logger import logger

    logger.warning("Tracking is not configured")
    logger.set_log_file("render", "/var/log/tagflow", "DEBUG")
"""

import copy
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar

from tagflow.constants import PROTECTED_KEYWORDS, TAGFLOW_DEFAULT_LOGGER

REDACTED = "***REDACTED***"


def _get_sanitize_pattern() -> re.Pattern:
    """Get or build the compiled regex pattern for sensitive data detection."""
    if not hasattr(_get_sanitize_pattern, "_pattern"):
        keywords = "|".join(re.escape(kw) for kw in PROTECTED_KEYWORDS)
        _get_sanitize_pattern._pattern = re.compile(  # noqa: SLF001
            rf"({keywords})(\s*[:=]\s*)(['\"]?)(\S+?)(\3)(?=\s|,|}}|\]|$)", re.IGNORECASE
        )
    return _get_sanitize_pattern._pattern  # noqa: SLF001


def sanitize_log_message(message: str) -> str:
    """Sanitize sensitive data from a log message.

    Args:
        message: The log message to sanitize.

    Returns:
        Message with sensitive values replaced by REDACTED.
    """
    if not isinstance(message, str):
        return message
    return _get_sanitize_pattern().sub(rf"\1\2\3{REDACTED}\5", message)


class MicrosecondFormatter(logging.Formatter):
    """Formatter including microseconds in timestamps and redacting protected values."""

    DEFAULT_FORMAT: ClassVar[str] = "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"

    def __init__(self) -> None:
        super().__init__(self.DEFAULT_FORMAT)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        ct = datetime.fromtimestamp(record.created)  # noqa: DTZ006
        return ct.strftime(datefmt) if datefmt else ct.isoformat()

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so other handlers still see the original record.
        record_copy = copy.copy(record)
        record_copy.msg = sanitize_log_message(str(record_copy.msg))
        if record_copy.args:
            record_copy.args = tuple(
                sanitize_log_message(arg) if isinstance(arg, str) else arg for arg in record_copy.args
            )
        return super().format(record_copy)


class TagFlowLogger:
    """
    Singleton logger class for TagFlow.

    Wraps the "tagflow" stdlib logger. Errors always go to stderr; a log file
    is only written after set_log_file() is called.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return
        self._initialized = True

        self._logger = logging.getLogger("tagflow")
        self._logger.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.ERROR)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        self._logger.addHandler(console_handler)

        self._file_handler: logging.FileHandler | None = None
        self._log_file: Path | None = None

    @property
    def log_file(self) -> Path | None:
        """Path of the active log file, if any."""
        return self._log_file

    def set_log_file(
        self,
        run_name: str,
        log_dir: str | Path | None = None,
        log_level: str = "INFO",
    ) -> Path:
        """
        Start writing log records to a timestamped file.

        Any previously configured file handler is closed first.

        Args:
            run_name: Prefix of the log file name.
            log_dir: Directory to store log files. If None, uses the default.
            log_level: Logging level name (e.g. "DEBUG", "INFO").

        Returns:
            The path of the new log file.
        """
        self.clear_log_file()

        level = getattr(logging, log_level.upper(), logging.INFO)
        self._logger.setLevel(level)

        log_path = Path(log_dir or TAGFLOW_DEFAULT_LOGGER["directory"])
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = log_path / f"{run_name}_{timestamp}.log"

        self._file_handler = logging.FileHandler(filepath, encoding="utf-8")
        self._file_handler.setLevel(level)
        self._file_handler.setFormatter(MicrosecondFormatter())
        self._logger.addHandler(self._file_handler)
        self._log_file = filepath

        self.debug(f"Logging '{run_name}' to {filepath}")
        return filepath

    def clear_log_file(self) -> None:
        """Stop file logging, if active."""
        if self._file_handler:
            self._logger.removeHandler(self._file_handler)
            self._file_handler.close()
            self._file_handler = None
        self._log_file = None

    def debug(self, message: str, *args: object, **kwargs: Any) -> None:
        """Log a debug message."""
        self._logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: object, **kwargs: Any) -> None:
        """Log an info message."""
        self._logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: object, **kwargs: Any) -> None:
        """Log a warning message."""
        self._logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: object, **kwargs: Any) -> None:
        """Log an error message."""
        self._logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: object, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(message, *args, **kwargs)


# Create the singleton instance
logger = TagFlowLogger()
