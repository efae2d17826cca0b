"""
Identity request core: how credentials talk to the identity provider.

Modules:
    authority   - Authority host constants and resolution (AZURE_AUTHORITY_HOST)
    options     - Credential options and default resolution
    config      - Credential options from YAML
    errors      - Terminal error taxonomy and response classification
    resilience  - Retry options (general and managed identity)
    pipeline    - Request pipeline, stages, factories and aiohttp transport
    client      - Token request helper applying the success-status contract
    logging     - Structured JSON logging with request-id context

Basic Usage:
    from azidentity import Request, resolve_options, new_default_pipeline, send_token_request
    from azidentity.authority import join_authority

    options = resolve_options()
    token_url = join_authority(options.authority_host, tenant_id, "oauth2/v2.0/token")

    async with new_default_pipeline(options) as pipeline:
        response = await send_token_request(pipeline, Request.form(token_url, form))
"""

from azidentity._version import __version__
from azidentity.authority import (
    AZURE_AUTHORITY_HOST_ENV,
    AZURE_CHINA,
    AZURE_GERMANY,
    AZURE_GOVERNMENT,
    AZURE_PUBLIC_CLOUD,
    DEFAULT_SUFFIX,
    KNOWN_AUTHORITY_HOSTS,
    resolve_authority_host,
)
from azidentity.client import send_token_request
from azidentity.errors import (
    SUCCESS_STATUS_CODES,
    AADAuthenticationFailedError,
    AuthenticationFailedError,
    CredentialUnavailableError,
    IdentityError,
    InvalidAuthorityHostError,
    InvalidConfigurationError,
    ProviderErrorPayload,
)
from azidentity.options import (
    ManagedIdentityCredentialOptions,
    RequestLogOptions,
    TelemetryOptions,
    TokenCredentialOptions,
    resolve_options,
)
from azidentity.pipeline import (
    Pipeline,
    Request,
    Response,
    new_default_msi_pipeline,
    new_default_pipeline,
)
from azidentity.resilience import RetryOptions
from azidentity.types import ErrorCategory

__all__ = [
    "__version__",
    # Authority
    "AZURE_AUTHORITY_HOST_ENV",
    "AZURE_CHINA",
    "AZURE_GERMANY",
    "AZURE_GOVERNMENT",
    "AZURE_PUBLIC_CLOUD",
    "DEFAULT_SUFFIX",
    "KNOWN_AUTHORITY_HOSTS",
    "resolve_authority_host",
    # Options
    "TokenCredentialOptions",
    "ManagedIdentityCredentialOptions",
    "RequestLogOptions",
    "TelemetryOptions",
    "RetryOptions",
    "resolve_options",
    # Pipeline
    "Pipeline",
    "Request",
    "Response",
    "new_default_pipeline",
    "new_default_msi_pipeline",
    "send_token_request",
    # Errors
    "ErrorCategory",
    "IdentityError",
    "CredentialUnavailableError",
    "AADAuthenticationFailedError",
    "AuthenticationFailedError",
    "ProviderErrorPayload",
    "InvalidConfigurationError",
    "InvalidAuthorityHostError",
    "SUCCESS_STATUS_CODES",
]
