# ABOUTME: Logging configuration using loguru sinks and stdlib level control
# ABOUTME: Dual-mode operation: interactive CLI (log files) vs production JSON logging

import logging
import os
import sys
import time
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

NOISY_LOGGERS = ["httpx", "httpcore", "urllib3", "asyncio"]


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("FLARESTONE_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep HTTP client chatter out of the scrape logs."""
    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def _ensure_log_dir(log_dir: Path) -> bool:
    """Create the log directory, retrying briefly on filesystem races."""
    max_retries = 3
    for attempt in range(max_retries):
        try:
            log_dir.mkdir(exist_ok=True)
            return True
        except OSError:
            if attempt == max_retries - 1:
                return False
            time.sleep(0.01 * (attempt + 1))
    return False


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging using loguru.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Custom log file path, uses default if None
    """
    if mode is None:
        mode = detect_logging_mode()

    setup_third_party_logging()

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(numeric_level)

    # structlog events go to stderr so stdout stays clean for command output
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    logger.remove()

    log_dir = Path("logs")
    if mode == LoggingMode.INTERACTIVE and not _ensure_log_dir(log_dir):
        # No writable log directory, so fall back to stdout
        mode = LoggingMode.PRODUCTION

    if mode == LoggingMode.PRODUCTION:
        logger.add(sys.stdout, level=log_level, format="{time} | {level} | {name} | {message}", serialize=True)
        return

    log_file_path = log_file or str(log_dir / "flarestone.log")

    logger.add(
        log_file_path,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        rotation="10 MB",
        retention="7 days",
    )

    logger.add(
        log_dir / "flarestone.json",
        level=log_level,
        format="{time} | {level} | {name} | {message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
    )

    logger.add(
        log_dir / "errors.log",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=True,
        diagnose=True,
    )


def get_logging_status() -> dict[str, Any]:
    """Get current logging configuration status."""
    mode = detect_logging_mode()
    log_dir = Path("logs")
    interactive = mode == LoggingMode.INTERACTIVE

    return {
        "mode": mode,
        "log_directory": str(log_dir.absolute()) if log_dir.exists() else None,
        "log_files": {
            "main": str(log_dir / "flarestone.log") if interactive else None,
            "json": str(log_dir / "flarestone.json") if interactive else None,
            "errors": str(log_dir / "errors.log") if interactive else None,
        },
        "third_party_suppressed": NOISY_LOGGERS + ["py.warnings"],
    }
