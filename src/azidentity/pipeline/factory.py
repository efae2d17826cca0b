"""
Pipeline factories.

Two pipelines share the same stage order and differ only in retry
configuration:

- ``new_default_pipeline``: retry settings come from the caller's options
- ``new_default_msi_pipeline``: fixed retry settings for managed identity
  endpoints, not configurable by the caller
"""

from azidentity.options import (
    ManagedIdentityCredentialOptions,
    ResolvedCredentialOptions,
    TokenCredentialOptions,
)
from azidentity.pipeline.base import Pipeline
from azidentity.pipeline.policies import (
    RequestLogPolicy,
    RetryPolicy,
    TelemetryPolicy,
    UniqueRequestIDPolicy,
)
from azidentity.pipeline.transport import default_transport
from azidentity.resilience.retry import MSI_RETRY_OPTIONS, RetryOptions
from azidentity.types import Transport


def _resolve_transport(transport: Transport | None) -> Transport:
    # Pipeline() rejects anything without a send() method
    return transport if transport is not None else default_transport()


def _build_pipeline(
    transport: Transport | None,
    options: TokenCredentialOptions | ResolvedCredentialOptions | ManagedIdentityCredentialOptions,
    retry: RetryOptions | None,
) -> Pipeline:
    return Pipeline(
        _resolve_transport(transport),
        TelemetryPolicy(options.telemetry),
        UniqueRequestIDPolicy(),
        RetryPolicy(retry),
        RequestLogPolicy(options.log_options),
    )


def new_default_pipeline(
    options: TokenCredentialOptions | ResolvedCredentialOptions | None = None,
) -> Pipeline:
    """
    Create a pipeline using the caller's options.

    Args:
        options: Credential options; ``options.retry`` of None means default
            retry settings

    Returns:
        Pipeline with telemetry, request id, retry and request log stages
    """
    options = options if options is not None else TokenCredentialOptions()
    return _build_pipeline(options.transport, options, options.retry)


def new_default_msi_pipeline(
    options: ManagedIdentityCredentialOptions | None = None,
) -> Pipeline:
    """
    Create a pipeline for managed identity endpoints.

    Retry settings are MSI_RETRY_OPTIONS regardless of the caller's options.
    """
    options = options if options is not None else ManagedIdentityCredentialOptions()
    return _build_pipeline(options.transport, options, MSI_RETRY_OPTIONS)


__all__ = ["new_default_msi_pipeline", "new_default_pipeline"]
