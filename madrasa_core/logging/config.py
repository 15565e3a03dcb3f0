# =============================================================================
# madrasa_core/logging/config.py
# Logging Configuration for Madrasa Manager
# =============================================================================

import logging
import sys
import time
from pathlib import Path
from datetime import datetime
from typing import Optional, Union


# Log format
LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Log directory
LOG_DIR = Path("logs")

# Libraries that log every HTTP round trip at INFO
NOISY_LOGGERS = (
    "urllib3",
    "httpx",
    "httpcore",
    "hpack",
    "supabase",
    "postgrest",
    "gotrue",
    "realtime",
)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_to_file: bool = True,
    log_filename: Optional[str] = None,
    log_dir: Optional[Path] = None,
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (default: INFO). Level names such as "DEBUG"
            are accepted as well.
        log_to_file: Whether to also log to a file
        log_filename: Custom log filename (default: madrasa_YYYY-MM-DD.log)
        log_dir: Directory for the log file (default: ./logs)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_to_file:
        directory = log_dir or LOG_DIR
        directory.mkdir(parents=True, exist_ok=True)
        if log_filename is None:
            log_filename = f"madrasa_{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(directory / log_filename, encoding="utf-8")
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,  # Override any existing configuration
    )

    # Reduce noise from third-party libraries
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("madrasa_core")
    logger.info("Logging initialized")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured logger instance

    Usage:
        from madrasa_core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Replay started")
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for logging operation timing and status.

    Exceptions listed in expected are logged as a warning without a
    traceback; anything else is logged as an error with one.

    Usage:
        with LogContext(logger, "Refreshing students cache"):
            coordinator.refresh_collection("students")
        # Logs: "Refreshing students cache... started"
        # Logs: "Refreshing students cache... completed (0.34s)"
    """

    def __init__(self, logger: logging.Logger, operation: str, expected: tuple = ()):
        self.logger = logger
        self.operation = operation
        self.expected = expected
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        self.logger.info(f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time

        if exc_type is None:
            self.logger.info(f"{self.operation}... completed ({elapsed:.2f}s)")
        elif isinstance(exc_val, self.expected):
            self.logger.warning(f"{self.operation}... not done ({elapsed:.2f}s): {exc_val}")
        else:
            self.logger.error(
                f"{self.operation}... failed ({elapsed:.2f}s): {exc_val}",
                exc_info=True
            )

        return False  # Don't suppress exceptions
