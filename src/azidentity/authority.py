"""
Authority host resolution.

The authority host is the base URL of the identity provider; tenant and
endpoint segments are joined onto it to build token endpoints. Resolution
order, lowest to highest precedence:

    1. Built-in public cloud default
    2. AZURE_AUTHORITY_HOST environment variable (when non-empty)
    3. Explicit host supplied by the caller

The resolved URL always has a scheme, a host, and a path ending in "/".
"""

import logging
import os
from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import ParseResult, urlparse

from azidentity.errors.exceptions import InvalidAuthorityHostError

logger = logging.getLogger(__name__)

AZURE_CHINA = "https://login.chinacloudapi.cn/"
AZURE_GERMANY = "https://login.microsoftonline.de/"
AZURE_GOVERNMENT = "https://login.microsoftonline.us/"
AZURE_PUBLIC_CLOUD = "https://login.microsoftonline.com/"

KNOWN_AUTHORITY_HOSTS: Mapping[str, str] = MappingProxyType(
    {
        "public": AZURE_PUBLIC_CLOUD,
        "china": AZURE_CHINA,
        "germany": AZURE_GERMANY,
        "government": AZURE_GOVERNMENT,
    }
)

AZURE_AUTHORITY_HOST_ENV = "AZURE_AUTHORITY_HOST"

# Marks a resource identifier as already being in scope format
DEFAULT_SUFFIX = "/.default"

AuthorityHost = str | ParseResult


def parse_authority_host(value: str) -> ParseResult:
    """
    Parse an authority host string.

    Raises:
        InvalidAuthorityHostError: Value is not an absolute URL with scheme and host
    """
    try:
        parsed = urlparse(value)
        # Accessing port validates it (urlparse defers that check)
        parsed.port
    except ValueError as e:
        raise InvalidAuthorityHostError(f"Invalid authority host {value!r}: {e}") from e

    if not parsed.scheme or not parsed.netloc:
        raise InvalidAuthorityHostError(
            f"Invalid authority host {value!r}: scheme and host are required"
        )
    return parsed


def normalize_authority_host(host: ParseResult) -> ParseResult:
    """Append "/" to the path when it is empty or lacks a trailing slash."""
    if not host.path or not host.path.endswith("/"):
        return host._replace(path=host.path + "/")
    return host


def default_authority_host(environ: Mapping[str, str] | None = None) -> str:
    """Public cloud default, replaced by AZURE_AUTHORITY_HOST when set."""
    environ = os.environ if environ is None else environ
    env_host = environ.get(AZURE_AUTHORITY_HOST_ENV, "")
    if env_host:
        logger.debug(
            "Using authority host from environment",
            extra={"authority_host": env_host},
        )
        return env_host
    return AZURE_PUBLIC_CLOUD


def resolve_authority_host(
    explicit: AuthorityHost | None = None,
    environ: Mapping[str, str] | None = None,
) -> ParseResult:
    """
    Resolve the authority host for a credential.

    Args:
        explicit: Caller-supplied host; used as-is when given (None or ""
            means not given)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Normalized, parsed authority host

    Raises:
        InvalidAuthorityHostError: The explicit or environment value is malformed
    """
    if explicit is None or explicit == "":
        host = parse_authority_host(default_authority_host(environ))
    elif isinstance(explicit, ParseResult):
        if not explicit.scheme or not explicit.netloc:
            raise InvalidAuthorityHostError(
                f"Invalid authority host {explicit.geturl()!r}: scheme and host are required"
            )
        host = explicit
    else:
        host = parse_authority_host(explicit)

    return normalize_authority_host(host)


def authority_host_for_cloud(cloud: str) -> str:
    """
    Look up the authority host of a known cloud by name.

    Raises:
        InvalidAuthorityHostError: Unknown cloud name
    """
    try:
        return KNOWN_AUTHORITY_HOSTS[cloud.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(KNOWN_AUTHORITY_HOSTS))
        raise InvalidAuthorityHostError(
            f"Unknown cloud {cloud!r}; expected one of: {known}"
        ) from None


def join_authority(host: ParseResult, *segments: str) -> str:
    """
    Join tenant/endpoint segments onto a resolved authority host.

    Example:
        >>> join_authority(resolve_authority_host(), "my-tenant", "oauth2/v2.0/token")
        'https://login.microsoftonline.com/my-tenant/oauth2/v2.0/token'
    """
    host = normalize_authority_host(host)
    suffix = "/".join(segment.strip("/") for segment in segments if segment.strip("/"))
    return host._replace(path=host.path + suffix).geturl()


__all__ = [
    "AZURE_AUTHORITY_HOST_ENV",
    "AZURE_CHINA",
    "AZURE_GERMANY",
    "AZURE_GOVERNMENT",
    "AZURE_PUBLIC_CLOUD",
    "DEFAULT_SUFFIX",
    "KNOWN_AUTHORITY_HOSTS",
    "AuthorityHost",
    "authority_host_for_cloud",
    "default_authority_host",
    "join_authority",
    "normalize_authority_host",
    "parse_authority_host",
    "resolve_authority_host",
]
