"""
Core types and protocols used across modules.

This module provides base types, enums, and protocol definitions that are
shared across the package so the pipeline, the error taxonomy and the
credential implementations agree on the same contracts.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from azidentity.pipeline.request import Request, Response


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures the retry stage may re-attempt
                   (e.g., connection resets, 429/503 responses)
        AUTH: The provider rejected the credential exchange
        UNAVAILABLE: A precondition for authenticating is missing; no
                     request was sent
        PERMANENT: Non-retriable failures that won't succeed on retry
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    UNAVAILABLE = "unavailable"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class Transport(Protocol):
    """
    Protocol for the innermost link of a pipeline.

    Implementations perform the network round trip and return a fully read
    response, or raise a transport error (connection failure, timeout).
    """

    async def send(self, request: Request) -> Response:
        """
        Send a request and return its response.

        Args:
            request: Request to send

        Returns:
            Response with the body already read
        """
        ...


class NextHandler(Protocol):
    """Callable handle to the remainder of a pipeline."""

    async def __call__(self, request: Request) -> Response: ...


class Policy(Protocol):
    """
    Protocol for a pipeline stage.

    A policy may inspect or modify the request, then hands it to ``next``
    (the rest of the pipeline) and may inspect the response or the error
    coming back.
    """

    async def send(self, request: Request, next: NextHandler) -> Response: ...


__all__ = [
    "ErrorCategory",
    "NextHandler",
    "Policy",
    "Transport",
]
