"""
Exception hierarchy for identity requests.

Every error that leaves a pipeline is terminal: the retry stage inside the
pipeline has already made its decision, so callers must not retry on top of
it. Each class carries its own fields and answers the same two queries,
``is_retryable`` and ``root_cause``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from azidentity.types import ErrorCategory

if TYPE_CHECKING:
    from azidentity.pipeline.request import Response


class IdentityError(Exception):
    """
    Base exception for all identity errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging and logging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        return False

    def is_not_retriable(self) -> bool:
        """Terminal marker checked by the retry stage."""
        return not self.is_retryable

    @property
    def root_cause(self) -> BaseException:
        """Innermost wrapped exception, or this error when nothing is wrapped."""
        current: BaseException = self
        while isinstance(current, IdentityError) and current.cause is not None:
            current = current.cause
        return current

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class InvalidConfigurationError(ValueError):
    """Credential or pipeline options are invalid."""


class InvalidAuthorityHostError(InvalidConfigurationError):
    """An authority host URL could not be parsed."""


# =============================================================================
# Credential Errors
# =============================================================================


class CredentialUnavailableError(IdentityError):
    """
    The conditions required to attempt authentication do not exist.

    Raised by credential implementations before any request is sent, e.g.
    when a required setting is missing.
    """

    category = ErrorCategory.UNAVAILABLE

    def __init__(self, credential_type: str, message: str):
        super().__init__(
            f"{credential_type}: {message}",
            context={"credential_type": credential_type},
        )
        self.credential_type = credential_type
        self.reason = message


class ProviderErrorPayload(BaseModel):
    """Error body returned by the identity provider."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    message: str = Field(default="", alias="error")
    description: str = Field(default="", alias="error_description")
    timestamp: str = ""
    trace_id: str = ""
    correlation_id: str = ""
    uri: str = Field(default="", alias="error_uri")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class AADAuthenticationFailedError(IdentityError):
    """
    The provider answered a token request with a failure.

    The originating response is referenced, not copied.
    """

    category = ErrorCategory.AUTH

    def __init__(self, payload: ProviderErrorPayload, response: Response | None = None):
        message = payload.message
        if not message:
            message = response.status_line if response is not None else type(self).__name__
        if payload.description:
            message = f"{message} {payload.description}"
        context = {
            "correlation_id": payload.correlation_id,
            "trace_id": payload.trace_id,
        }
        if response is not None:
            context["http_status"] = response.status
        super().__init__(message, context=context)
        self.payload = payload
        self.response = response

    @property
    def description(self) -> str:
        return self.payload.description

    @property
    def timestamp(self) -> str:
        return self.payload.timestamp

    @property
    def trace_id(self) -> str:
        return self.payload.trace_id

    @property
    def correlation_id(self) -> str:
        return self.payload.correlation_id

    @property
    def uri(self) -> str:
        return self.payload.uri


class AuthenticationFailedError(IdentityError):
    """
    The authentication request failed before a response was received.

    Wraps the lower-level error; ``unwrap()`` returns it.
    """

    category = ErrorCategory.AUTH

    def __init__(self, inner: BaseException, message: str | None = None):
        super().__init__(message or str(inner) or type(inner).__name__, cause=inner)
        self.inner = inner

    def unwrap(self) -> BaseException:
        return self.inner


# =============================================================================
# Classification Utilities
# =============================================================================

SUCCESS_STATUS_CODES = frozenset({200, 201})


def new_aad_authentication_failed_error(response: Response) -> AADAuthenticationFailedError:
    """
    Build a provider failure from a non-success response.

    Never raises: a body that is not a JSON error object yields a payload whose
    message is the status line and whose description names the parse failure.
    """
    try:
        payload = response.unmarshal_as_json(ProviderErrorPayload)
    except ValidationError as e:
        payload = ProviderErrorPayload(
            message=response.status_line,
            description=f"Failed to unmarshal response: {_first_error(e)}",
        )
    else:
        if not payload.message:
            payload = payload.model_copy(update={"message": response.status_line})
    return AADAuthenticationFailedError(payload, response)


def _first_error(error: ValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


def is_success_status(status_code: int) -> bool:
    return status_code in SUCCESS_STATUS_CODES


def is_retryable_error(exc: BaseException) -> bool:
    """
    Check if a caller may retry after this exception.

    Identity errors never are. Anything else is judged by its own
    ``is_retryable`` attribute when it has one.
    """
    if isinstance(exc, IdentityError):
        return exc.is_retryable
    return bool(getattr(exc, "is_retryable", False))


def classify_http_status(status_code: int) -> ErrorCategory:
    """Classify an HTTP status code returned by the provider."""
    if status_code in SUCCESS_STATUS_CODES:
        return ErrorCategory.UNKNOWN  # Not an error

    if status_code in (408, 429):
        return ErrorCategory.TRANSIENT

    if status_code in (400, 401, 403):
        return ErrorCategory.AUTH

    if 400 <= status_code < 500:
        return ErrorCategory.PERMANENT

    if status_code >= 500:
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


__all__ = [
    "SUCCESS_STATUS_CODES",
    "AADAuthenticationFailedError",
    "AuthenticationFailedError",
    "CredentialUnavailableError",
    "IdentityError",
    "InvalidAuthorityHostError",
    "InvalidConfigurationError",
    "ProviderErrorPayload",
    "classify_http_status",
    "is_retryable_error",
    "is_success_status",
    "new_aad_authentication_failed_error",
]
