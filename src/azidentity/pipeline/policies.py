"""
Pipeline stages.

Stages run in this order, outermost first:

    TelemetryPolicy -> UniqueRequestIDPolicy -> RetryPolicy -> RequestLogPolicy -> transport

Everything inside the retry stage runs once per attempt, so the log stage
records every try and not only the final outcome.
"""

import asyncio
import logging
import platform
import time
import uuid

from azidentity._version import __version__
from azidentity.errors.classifiers import classify_transport_error
from azidentity.logging.context_managers import LogContext
from azidentity.logging.formatters import redact_secrets
from azidentity.options import RequestLogOptions, TelemetryOptions
from azidentity.pipeline.request import Request, Response
from azidentity.resilience.retry import DEFAULT_RETRY_OPTIONS, RetryOptions, parse_retry_after
from azidentity.types import ErrorCategory, NextHandler

logger = logging.getLogger(__name__)

USER_AGENT_HEADER = "User-Agent"
REQUEST_ID_HEADER = "x-ms-client-request-id"
RETRY_AFTER_HEADER = "Retry-After"

# Request.telemetry key holding the 1-based try number of an attempt
TRY_NUMBER_KEY = "try_number"


class TelemetryPolicy:
    """Tags every request with the library User-Agent."""

    def __init__(self, options: TelemetryOptions | None = None):
        self.options = options or TelemetryOptions()
        value = (
            f"azsdk-python-identity/{__version__} "
            f"Python/{platform.python_version()} ({platform.platform()})"
        )
        if self.options.application_id:
            value = f"{self.options.application_id} {value}"
        self.user_agent = value

    async def send(self, request: Request, next: NextHandler) -> Response:
        if not self.options.disabled:
            existing = request.get_header(USER_AGENT_HEADER)
            value = f"{self.user_agent} {existing}" if existing else self.user_agent
            request.set_header(USER_AGENT_HEADER, value)
        return await next(request)


class UniqueRequestIDPolicy:
    """
    Gives every request a client request id.

    The id is set once, outside the retry stage, so all tries of a request
    share it. It is also published to the logging context.
    """

    async def send(self, request: Request, next: NextHandler) -> Response:
        request_id = request.get_header(REQUEST_ID_HEADER)
        if not request_id:
            request_id = str(uuid.uuid4())
            request.set_header(REQUEST_ID_HEADER, request_id)
        with LogContext(request_id=request_id):
            return await next(request)


def _log_retry(request: Request, try_number: int, options: RetryOptions, delay: float,
               delay_source: str, reason: str, error_category: str,
               server_retry_after: float | None = None) -> None:
    logger.warning(
        "Retryable failure for %s %s, will retry: %s",
        request.method,
        redact_secrets(request.url),
        reason,
        extra={
            "attempt": try_number,
            "max_attempts": options.max_tries,
            "delay_seconds": round(delay, 2),
            "delay_source": delay_source,
            "error_category": error_category,
            "error_message": reason[:200],
            "server_retry_after": server_retry_after,
            "try_timeout": options.try_timeout,
        },
    )


class RetryPolicy:
    """
    Re-attempts requests that failed transiently.

    Each try runs under ``try_timeout`` (clamped to the request deadline).
    A response with a retriable status, or a transient transport error,
    leads to another try after a backoff delay. Once tries are exhausted the
    last response is returned, or the last error re-raised.
    """

    def __init__(self, options: RetryOptions | None = None):
        self.options = options or DEFAULT_RETRY_OPTIONS

    async def send(self, request: Request, next: NextHandler) -> Response:
        options = self.options
        loop = asyncio.get_running_loop()

        for try_number in range(1, options.max_tries + 1):
            attempt = request.copy()
            attempt.telemetry[TRY_NUMBER_KEY] = try_number

            timeout = options.try_timeout
            if request.deadline is not None:
                remaining = request.deadline - loop.time()
                if remaining <= 0:
                    raise TimeoutError(
                        f"Request deadline passed before try {try_number} of {request.url}"
                    )
                timeout = min(timeout, remaining)

            response: Response | None = None
            error: Exception | None = None
            try:
                async with asyncio.timeout(timeout):
                    response = await next(attempt)
            except Exception as e:
                error = e

            is_last = try_number >= options.max_tries

            if error is not None:
                category = classify_transport_error(error)
                if category == ErrorCategory.PERMANENT or is_last:
                    logger.warning(
                        "Request failed, not retrying: %s",
                        str(error)[:200] or type(error).__name__,
                        extra={
                            "attempt": try_number,
                            "max_attempts": options.max_tries,
                            "error_category": category.value,
                            "error_type": type(error).__name__,
                        },
                    )
                    raise error
                delay = options.get_delay(try_number)
                delay_source = "exponential_backoff"
                reason = str(error) or type(error).__name__
                error_category = category.value
                server_delay = None
            else:
                if not options.should_retry_status(response.status) or is_last:
                    if try_number > 1:
                        logger.info(
                            "Retry finished after %d tries with status %d",
                            try_number,
                            response.status,
                            extra={"attempt": try_number, "http_status": response.status},
                        )
                    return response
                server_delay = parse_retry_after(response.get_header(RETRY_AFTER_HEADER))
                if server_delay is not None:
                    delay = min(server_delay, options.max_retry_delay)
                    delay_source = "server"
                else:
                    delay = options.get_delay(try_number)
                    delay_source = "exponential_backoff"
                reason = response.status_line
                error_category = ErrorCategory.TRANSIENT.value

            if request.deadline is not None and loop.time() + delay >= request.deadline:
                logger.warning(
                    "Not retrying %s: next try would start after the request deadline",
                    redact_secrets(request.url),
                    extra={"attempt": try_number, "delay_seconds": round(delay, 2)},
                )
                if response is not None:
                    return response
                raise error

            _log_retry(
                request, try_number, options, delay, delay_source, reason, error_category, server_delay
            )
            await asyncio.sleep(delay)

        # Should not reach here: the last try always returns or raises
        raise RuntimeError(f"Retry loop ended without a result for {request.url}")


class RequestLogPolicy:
    """Logs every try: the outgoing request and its response or error."""

    def __init__(self, options: RequestLogOptions | None = None):
        self.options = options or RequestLogOptions()

    async def send(self, request: Request, next: NextHandler) -> Response:
        try_number = request.telemetry.get(TRY_NUMBER_KEY, 1)
        with LogContext(try_number=try_number):
            return await self._send(request, next, try_number)

    async def _send(self, request: Request, next: NextHandler, try_number: int) -> Response:
        url = redact_secrets(request.url)
        extra: dict[str, object] = {
            "http_method": request.method,
            "http_url": url,
            "attempt": try_number,
        }
        if self.options.include_body and request.body:
            extra["request_body"] = redact_secrets(request.body.decode("utf-8", errors="replace"))

        logger.info("==> Outgoing request %s %s (try=%d)", request.method, url, try_number, extra=extra)

        start = time.perf_counter()
        try:
            response = await next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.warning(
                "<== Request %s %s failed after %.0fms: %s",
                request.method,
                url,
                duration_ms,
                str(e)[:200] or type(e).__name__,
                extra={
                    "http_method": request.method,
                    "http_url": url,
                    "attempt": try_number,
                    "duration_ms": duration_ms,
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration = time.perf_counter() - start
        extra = {
            "http_method": request.method,
            "http_url": url,
            "attempt": try_number,
            "http_status": response.status,
            "duration_ms": duration * 1000,
        }
        if self.options.include_body and response.body:
            extra["response_body"] = response.text()[:2000]

        level = logging.INFO
        if response.status >= 400 or duration > self.options.slow_request_threshold:
            level = logging.WARNING
        logger.log(
            level,
            "<== Response %s for %s %s (try=%d, %.0fms)",
            response.status_line,
            request.method,
            url,
            try_number,
            duration * 1000,
            extra=extra,
        )
        return response


__all__ = [
    "REQUEST_ID_HEADER",
    "RETRY_AFTER_HEADER",
    "TRY_NUMBER_KEY",
    "USER_AGENT_HEADER",
    "RequestLogPolicy",
    "RetryPolicy",
    "TelemetryPolicy",
    "UniqueRequestIDPolicy",
]
