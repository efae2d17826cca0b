"""
Structured logging module.

Provides JSON logging with request-id context propagation.
"""

from azidentity.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from azidentity.logging.context_managers import LogContext
from azidentity.logging.formatters import ConsoleFormatter, JSONFormatter, redact_secrets
from azidentity.logging.setup import NOISY_LOGGERS, setup_logging

__all__ = [
    # Setup
    "setup_logging",
    "NOISY_LOGGERS",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    "redact_secrets",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Context Managers
    "LogContext",
]
