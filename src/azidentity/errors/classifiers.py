"""
Transport error classification for the retry stage.

Maps exceptions raised below the retry stage (aiohttp client errors, timeouts,
socket errors, errors raised by inner stages) to an ErrorCategory so the retry
stage can decide whether another attempt is worthwhile.
"""

import asyncio
import json

import aiohttp

from azidentity.errors.exceptions import IdentityError
from azidentity.types import ErrorCategory

# aiohttp errors that mean the request never reached a usable state; a fresh
# attempt may succeed
TRANSIENT_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientConnectionError,
    aiohttp.ClientPayloadError,
    aiohttp.ServerTimeoutError,
    TimeoutError,
    ConnectionError,
)

# Errors that will fail the same way on every attempt
PERMANENT_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.InvalidURL,
    aiohttp.ClientSSLError,
    json.JSONDecodeError,
    UnicodeDecodeError,
    ValueError,
    TypeError,
)


def classify_transport_error(error: BaseException) -> ErrorCategory:
    """
    Classify an exception raised while sending a request.

    Args:
        error: Exception raised by the transport or an inner stage

    Returns:
        ErrorCategory indicating whether the retry stage may try again
    """
    if isinstance(error, asyncio.CancelledError):
        return ErrorCategory.PERMANENT

    # Terminal errors raised by inner stages or credential code
    if isinstance(error, IdentityError) or getattr(error, "is_retryable", None) is False:
        return ErrorCategory.PERMANENT

    # Checked before the transient tuple: ClientSSLError and InvalidURL derive
    # from connection errors
    if isinstance(error, PERMANENT_TRANSPORT_ERRORS):
        return ErrorCategory.PERMANENT

    if isinstance(error, TRANSIENT_TRANSPORT_ERRORS):
        return ErrorCategory.TRANSIENT

    if isinstance(error, aiohttp.ClientError):
        return ErrorCategory.TRANSIENT

    if isinstance(error, OSError):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


def is_transient_transport_error(error: BaseException) -> bool:
    return classify_transport_error(error) == ErrorCategory.TRANSIENT


__all__ = [
    "PERMANENT_TRANSPORT_ERRORS",
    "TRANSIENT_TRANSPORT_ERRORS",
    "classify_transport_error",
    "is_transient_transport_error",
]
