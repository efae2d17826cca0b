"""
Token request helper applying the success-status contract.

Credential implementations send token requests through a pipeline and must
treat exactly 200 and 201 as success. ``send_token_request`` does that and
turns every failure into a terminal identity error.
"""

import logging

from azidentity.errors.exceptions import (
    AuthenticationFailedError,
    IdentityError,
    is_success_status,
    new_aad_authentication_failed_error,
)
from azidentity.pipeline.base import Pipeline
from azidentity.pipeline.request import Request, Response

logger = logging.getLogger(__name__)


async def send_token_request(pipeline: Pipeline, request: Request) -> Response:
    """
    Send a token request and enforce the success contract.

    Args:
        pipeline: Pipeline to send through (it owns all retrying)
        request: Token request

    Returns:
        Response with status 200 or 201

    Raises:
        AADAuthenticationFailedError: Provider answered with any other status
        AuthenticationFailedError: No response was received
        asyncio.CancelledError: The caller cancelled the request
    """
    try:
        response = await pipeline.run(request)
    except IdentityError:
        raise
    except Exception as e:
        logger.error(
            "Token request failed before a response was received: %s",
            str(e)[:200] or type(e).__name__,
            extra={"error_type": type(e).__name__},
        )
        raise AuthenticationFailedError(e) from e

    if is_success_status(response.status):
        return response

    error = new_aad_authentication_failed_error(response)
    logger.warning(
        "Token request rejected by provider: %s",
        error.message[:200],
        extra={
            "http_status": response.status,
            "correlation_id": error.correlation_id or None,
            "trace_id": error.trace_id or None,
        },
    )
    raise error


__all__ = ["send_token_request"]
