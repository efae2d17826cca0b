"""
Credential options.

Options are plain dataclasses. ``resolve_options`` fills in defaults and
returns a new object; the caller's options are never mutated.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping
from urllib.parse import ParseResult

from azidentity.authority import AuthorityHost, resolve_authority_host
from azidentity.errors.exceptions import InvalidConfigurationError
from azidentity.resilience.retry import RetryOptions
from azidentity.types import Transport

logger = logging.getLogger(__name__)

MAX_APPLICATION_ID_LENGTH = 24


@dataclass(frozen=True)
class TelemetryOptions:
    """
    Telemetry stage behavior.

    Attributes:
        application_id: Prefix added to the User-Agent header
        disabled: Leave the User-Agent header untouched
    """

    application_id: str | None = None
    disabled: bool = False

    def __post_init__(self):
        app_id = self.application_id
        if app_id and (len(app_id) > MAX_APPLICATION_ID_LENGTH or " " in app_id):
            raise InvalidConfigurationError(
                f"application_id must be at most {MAX_APPLICATION_ID_LENGTH} "
                "characters and contain no spaces"
            )


@dataclass(frozen=True)
class RequestLogOptions:
    """
    Request log stage behavior.

    Attributes:
        include_body: Log request and response bodies (secrets redacted)
        slow_request_threshold: Seconds after which a try is logged as slow
    """

    include_body: bool = False
    slow_request_threshold: float = 5.0


@dataclass
class TokenCredentialOptions:
    """
    Options shared by credentials that talk to the identity provider.

    Attributes:
        authority_host: Identity provider base URL (None = environment or public cloud)
        transport: Transport for HTTP requests (None = default aiohttp transport)
        log_options: Request log stage behavior
        retry: Retry behavior (None = library defaults)
        telemetry: Telemetry stage behavior
    """

    authority_host: AuthorityHost | None = None
    transport: Transport | None = None
    log_options: RequestLogOptions = field(default_factory=RequestLogOptions)
    retry: RetryOptions | None = None
    telemetry: TelemetryOptions = field(default_factory=TelemetryOptions)


@dataclass
class ManagedIdentityCredentialOptions:
    """
    Options for managed identity credentials.

    There is no retry field: managed identity endpoints use fixed retry
    settings.
    """

    transport: Transport | None = None
    log_options: RequestLogOptions = field(default_factory=RequestLogOptions)
    telemetry: TelemetryOptions = field(default_factory=TelemetryOptions)


@dataclass(frozen=True)
class ResolvedCredentialOptions:
    """TokenCredentialOptions with the authority host resolved and normalized."""

    authority_host: ParseResult
    transport: Transport | None
    log_options: RequestLogOptions
    retry: RetryOptions | None
    telemetry: TelemetryOptions

    @property
    def authority_host_url(self) -> str:
        return self.authority_host.geturl()


def resolve_options(
    options: TokenCredentialOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResolvedCredentialOptions:
    """
    Fill in defaults for credential options.

    Args:
        options: Caller options; None means all defaults
        environ: Environment mapping for the authority override (default: os.environ)

    Returns:
        Resolved options whose authority host has a scheme, a host and a
        trailing "/"

    Raises:
        InvalidAuthorityHostError: The authority host (explicit or from the
            environment) is malformed
    """
    options = options if options is not None else TokenCredentialOptions()
    authority_host = resolve_authority_host(options.authority_host, environ)

    logger.debug(
        "Resolved credential options",
        extra={
            "authority_host": authority_host.geturl(),
            "custom_transport": options.transport is not None,
            "custom_retry": options.retry is not None,
        },
    )

    return ResolvedCredentialOptions(
        authority_host=authority_host,
        transport=options.transport,
        log_options=options.log_options,
        retry=options.retry,
        telemetry=options.telemetry,
    )


__all__ = [
    "MAX_APPLICATION_ID_LENGTH",
    "ManagedIdentityCredentialOptions",
    "RequestLogOptions",
    "ResolvedCredentialOptions",
    "TelemetryOptions",
    "TokenCredentialOptions",
    "resolve_options",
]
