"""Logging configuration for Live Network.

Everything logs under the ``livenet`` logger. ``setup_logging`` attaches a
rotating file in the data directory and a colored stderr stream; modules
ask for their logger with ``get_logger(__name__)``.

Usage:
    from config.logging_config import setup_logging, get_logger

    setup_logging(data_dir=Path.home() / ".live-network")

    logger = get_logger(__name__)
    logger.info("Sampling started")
"""
import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Optional

from config.constants import STORAGE

ROOT_LOGGER_NAME = 'livenet'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_loggers: Dict[str, logging.Logger] = {}


class LiveNetworkFormatter(logging.Formatter):
    """Stderr formatter that colors the level name on a terminal."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname)
        if not (self.use_colors and color and sys.stderr.isatty()):
            return super().format(record)
        # Colorize a copy so file handlers keep the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _file_handler(data_dir: Path) -> logging.Handler:
    data_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        data_dir / STORAGE.LOG_FILE,
        maxBytes=STORAGE.LOG_MAX_BYTES,
        backupCount=STORAGE.LOG_BACKUP_COUNT,
        encoding='utf-8',
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler(debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    # Without --debug the console only shows problems; the file gets the rest
    handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    handler.setFormatter(LiveNetworkFormatter(use_colors=True))
    return handler


def setup_logging(
    data_dir: Optional[Path] = None,
    debug: bool = False,
    console_output: bool = True,
    log_to_file: bool = True
) -> logging.Logger:
    """Configure the ``livenet`` logger.

    Safe to call again; previous handlers are closed and replaced.

    Args:
        data_dir: Directory for the log file. Defaults to ~/.live-network/
        debug: Log at DEBUG instead of INFO.
        console_output: Also log to stderr.
        log_to_file: Write a rotating log file. The data directory is only
            created when this is set.

    Returns:
        The ``livenet`` logger.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if log_to_file:
        root_logger.addHandler(_file_handler(data_dir or Path.home() / STORAGE.DATA_DIR_NAME))
    if console_output:
        root_logger.addHandler(_console_handler(debug))

    root_logger.info(
        f"Logging initialized - level={'DEBUG' if debug else 'INFO'}, "
        f"file={log_to_file}, console={console_output}"
    )
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return the ``livenet`` child logger for a module.

    Only the last two dotted parts of ``name`` are kept.

    Example:
        >>> get_logger("monitor.sampling").name
        'livenet.monitor.sampling'
    """
    short_name = '.'.join(name.split('.')[-2:])
    logger = _loggers.get(short_name)
    if logger is None:
        logger = _loggers[short_name] = logging.getLogger(f'{ROOT_LOGGER_NAME}.{short_name}')
    return logger


def log_exception(logger: logging.Logger, message: str, exc: BaseException) -> None:
    """Log ``exc`` at ERROR with its traceback, prefixed by ``message``."""
    logger.error(
        f"{message}: {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={'exception_type': type(exc).__name__}
    )


class LogContext:
    """Log the start and duration of an operation.

    A failure inside the block is logged as a warning and re-raised.

    Example:
        >>> with LogContext(logger, "Counter warm-up for 'eth0'"):
        ...     source._read_rates()
        # Logs: "Counter warm-up for 'eth0' completed in 1002ms"
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self._started: float = 0.0

    def __enter__(self) -> "LogContext":
        self._started = time.monotonic()
        self.logger.log(self.level, f"{self.operation} starting...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        elapsed_ms = (time.monotonic() - self._started) * 1000
        if exc_type is not None:
            self.logger.warning(f"{self.operation} failed after {elapsed_ms:.0f}ms: {exc_val}")
        else:
            self.logger.log(self.level, f"{self.operation} completed in {elapsed_ms:.0f}ms")
        return False
