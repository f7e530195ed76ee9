# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: Re-exports the loguru setup and the structlog utilities used across the package

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .utils import LogContext, get_logger, log_api_call, with_operation_context, with_pipeline_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Utilities
    "LogContext",
    "get_logger",
    "log_api_call",
    "with_operation_context",
    "with_pipeline_context",
]
