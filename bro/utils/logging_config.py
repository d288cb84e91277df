"""
Logging Configuration

Sets up console (and optionally file) logging for the bro command line and
provides the ``[bro]`` channel used to report bundling events and errors.

Console output keeps ``[bro]`` lines as they are written; other loggers are
prefixed with their level, and with their name in debug mode.
"""

import logging
import logging.handlers
import sys
from enum import Enum
from pathlib import Path
from typing import Optional

import click


BRO_LOGGER_NAME = "bro"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ConsoleFormatter(logging.Formatter):
    """Leaves the [bro] channel untouched and labels everything else."""

    def __init__(self, debug_mode: bool):
        super().__init__(
            "%(levelname)s %(name)s: %(message)s" if debug_mode else "%(levelname)s: %(message)s"
        )

    def format(self, record: logging.LogRecord) -> str:
        if record.name == BRO_LOGGER_NAME:
            return record.getMessage()
        return super().format(record)


class LoggingConfig:
    """
    Centralized logging configuration for bro.

    Configured once per process; later calls are ignored.
    """

    def __init__(self):
        self._configured = False
        self._log_file_handler: Optional[logging.Handler] = None
        self._console_handler: Optional[logging.Handler] = None

    def configure_logging(self, level: str = "info", log_file: Optional[str] = None) -> None:
        """
        Configure logging for the application.

        Args:
            level: Logging level (debug, info, warning, error)
            log_file: Optional log file path, rotated at 10MB
        """
        if self._configured:
            return

        log_level = self._get_log_level(level)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)
        root_logger.handlers.clear()

        self._console_handler = logging.StreamHandler(sys.stderr)
        self._console_handler.setFormatter(ConsoleFormatter(log_level == logging.DEBUG))
        root_logger.addHandler(self._console_handler)

        if log_file:
            self._configure_file_logging(log_file)

        self._configured = True
        logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file}")

    def _get_log_level(self, level: str) -> int:
        try:
            return getattr(logging, LogLevel(level.lower()).name)
        except ValueError:
            return logging.INFO

    def _configure_file_logging(self, log_file: str) -> None:
        """Add a rotating file handler; console logging goes on if it fails."""
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._log_file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding='utf-8'
            )
        except OSError as e:
            logging.getLogger(__name__).warning(f"Failed to setup log file {log_file}: {e}")
            return

        self._log_file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logging.getLogger().addHandler(self._log_file_handler)

    def log_operation_timing(self, operation: str, duration: float) -> None:
        """Log how long an operation took: debug below a second, info above."""
        logger = logging.getLogger(__name__)

        if duration < 1.0:
            logger.debug(f"{operation} completed in {duration*1000:.0f}ms")
        else:
            logger.info(f"{operation} completed in {duration:.1f}s")


# Global logging configuration instance
logging_config = LoggingConfig()


def bro_log(message: str) -> None:
    """Write a message to the ``[bro]`` logging channel."""
    prefix = click.style("bro", fg="cyan")
    logging.getLogger(BRO_LOGGER_NAME).info(f"[{prefix}] {message}")
