"""
Error classification and exception hierarchy.

Provides:
- IdentityError hierarchy for typed, terminal exceptions
- Provider error payload parsing for failed token responses
- Transport error classification used by the retry stage
"""

from azidentity.errors.classifiers import (
    PERMANENT_TRANSPORT_ERRORS,
    TRANSIENT_TRANSPORT_ERRORS,
    classify_transport_error,
    is_transient_transport_error,
)
from azidentity.errors.exceptions import (
    SUCCESS_STATUS_CODES,
    AADAuthenticationFailedError,
    AuthenticationFailedError,
    CredentialUnavailableError,
    IdentityError,
    InvalidAuthorityHostError,
    InvalidConfigurationError,
    ProviderErrorPayload,
    classify_http_status,
    is_retryable_error,
    is_success_status,
    new_aad_authentication_failed_error,
)
from azidentity.types import ErrorCategory

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "IdentityError",
    "InvalidConfigurationError",
    "InvalidAuthorityHostError",
    # Identity errors
    "CredentialUnavailableError",
    "AADAuthenticationFailedError",
    "AuthenticationFailedError",
    "ProviderErrorPayload",
    # Classification utilities
    "SUCCESS_STATUS_CODES",
    "classify_http_status",
    "is_retryable_error",
    "is_success_status",
    "new_aad_authentication_failed_error",
    # Transport classifiers
    "PERMANENT_TRANSPORT_ERRORS",
    "TRANSIENT_TRANSPORT_ERRORS",
    "classify_transport_error",
    "is_transient_transport_error",
]
