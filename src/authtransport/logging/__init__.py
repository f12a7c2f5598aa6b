"""
Structured logging module.

Provides JSON and console logging with context propagation.
"""

from authtransport.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from authtransport.logging.formatters import ConsoleFormatter, JSONFormatter, sanitize_url
from authtransport.logging.setup import get_logger, setup_logging

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    "sanitize_url",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
]
