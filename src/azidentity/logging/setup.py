"""Logging setup and configuration."""

import logging
import sys

from azidentity.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_LEVEL = logging.INFO

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "aiohttp.access",
    "aiohttp.client",
    "asyncio",
    "urllib3",
]


def setup_logging(
    level: int = DEFAULT_LEVEL,
    json_format: bool = False,
    suppress_noisy: bool = True,
    stream=None,
) -> logging.Logger:
    """
    Configure the root logger with a single stream handler.

    Args:
        level: Root log level
        json_format: Emit one JSON object per line instead of console text
        suppress_noisy: Quiet down HTTP client and event loop loggers
        stream: Output stream (default: stdout)

    Returns:
        The configured root logger
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if suppress_noisy:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
