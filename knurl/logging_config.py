"""
Centralized logging configuration for knurl.

Log file: <log_dir>/knurl.log (with rotation)

Usage:
    from knurl.logging_config import setup_logging
    setup_logging(log_dir)  # Call once at startup

All knurl.* loggers will write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path


# Global configuration
LOG_FILE_NAME = "knurl.log"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB per file
BACKUP_COUNT = 3

_logging_initialized = False


def setup_logging(
    log_dir: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for knurl.

    Args:
        log_dir: Directory for the log file (created if missing)
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    root_logger = logging.getLogger("knurl")
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers (for re-initialization)
    root_logger.handlers.clear()

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(funcName)-25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-25s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"knurl logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_file.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the knurl namespace.

    Args:
        name: Module name (typically __name__)
    """
    if name.startswith("knurl."):
        return logging.getLogger(name)
    return logging.getLogger(f"knurl.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_phase(
    logger: logging.Logger,
    request_id: str,
    phase_name: str,
    status: str,
    duration_ms: float | None = None,
    details: str | None = None,
) -> None:
    """Log pipeline phase execution."""
    duration_str = f" | {duration_ms:.1f}ms" if duration_ms is not None else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"REQUEST {request_id} | PHASE | {phase_name} | {status}{duration_str}{details_str}")


def log_engine(
    logger: logging.Logger,
    request_id: str,
    engine: str,
    action: str,
    details: str | None = None,
) -> None:
    """Log engine activity (dispatch, send, receive)."""
    details_str = f" | {details}" if details else ""
    logger.info(f"REQUEST {request_id} | ENGINE | {engine} | {action}{details_str}")
