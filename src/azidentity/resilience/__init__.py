"""
Resilience module.

Components:
    - RetryOptions: retry/backoff contract captured by a pipeline
    - STATUS_CODES_FOR_RETRY: statuses retried by the general pipeline
    - MSI_RETRY_OPTIONS: fixed settings for managed identity endpoints
"""

from .retry import (
    DEFAULT_RETRY_OPTIONS,
    MSI_RETRY_OPTIONS,
    MSI_STATUS_CODES_FOR_RETRY,
    STATUS_CODES_FOR_RETRY,
    RetryOptions,
    parse_retry_after,
)

__all__ = [
    "RetryOptions",
    "parse_retry_after",
    "DEFAULT_RETRY_OPTIONS",
    "MSI_RETRY_OPTIONS",
    "STATUS_CODES_FOR_RETRY",
    "MSI_STATUS_CODES_FOR_RETRY",
]
