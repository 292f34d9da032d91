"""Logging configuration for termwm.

Provides:
- Configurable log levels (WARNING, INFO, DEBUG)
- Colored stderr output when no display is active
- File logging while curses owns the terminal
- Performance timing logs
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional


# Default log format
DEFAULT_FORMAT = "%(levelname)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        original = record.levelname
        if original in self.COLORS:
            record.levelname = f"{self.COLORS[original]}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """Configure logging for the termwm package.

    Args:
        verbose: Enable verbose logging (INFO level)
        debug: Enable debug logging (DEBUG level)
        log_file: Log to this file instead of stderr; required while a
            curses display is active so log lines do not corrupt the screen
        level: Level name from the configuration, used when neither
            verbose nor debug is given

    Returns:
        Configured package logger
    """
    logger = logging.getLogger('termwm')

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if debug:
        logger.setLevel(logging.DEBUG)
        log_format = DEBUG_FORMAT
    elif verbose:
        logger.setLevel(logging.INFO)
        log_format = VERBOSE_FORMAT
    elif level is not None:
        logger.setLevel(LEVELS.get(level, logging.WARNING))
        log_format = VERBOSE_FORMAT
    else:
        logger.setLevel(logging.WARNING)
        log_format = DEFAULT_FORMAT

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        # Files always carry timestamps
        formatter = logging.Formatter(DEBUG_FORMAT if debug else VERBOSE_FORMAT)
    else:
        handler = logging.StreamHandler(sys.stderr)
        # Use colored formatter if terminal supports it
        if sys.stderr.isatty():
            formatter = ColoredFormatter(log_format)
        else:
            formatter = logging.Formatter(log_format)

    handler.setLevel(logger.level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Examples:
        >>> with log_timing("Start programs", logger):
        ...     wm.start_programs(config.startup)
        INFO: Start programs completed in 1.32ms
    """
    start = time.perf_counter()
    logger.debug(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{operation} completed in {elapsed_ms:.2f}ms")
