"""Credential options from a YAML file.

Reads the ``identity:`` section of a YAML config file:

    identity:
      authority_host: ${AZURE_AUTHORITY_HOST:-https://login.microsoftonline.com/}
      cloud: public              # alternative to authority_host
      retry:
        max_retries: 3
        retry_delay: 4
        max_retry_delay: 120
        try_timeout: 60
        status_codes: [408, 429, 500, 502, 503, 504]
      logging:
        include_body: false
        slow_request_threshold: 5
      telemetry:
        application_id: my-app
        disabled: false

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml

from azidentity.authority import authority_host_for_cloud
from azidentity.errors.exceptions import InvalidConfigurationError
from azidentity.options import RequestLogOptions, TelemetryOptions, TokenCredentialOptions
from azidentity.resilience.retry import RetryOptions

logger = logging.getLogger(__name__)

CONFIG_SECTION = "identity"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-(([^}]*))?)?\}")


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return _ENV_VAR_PATTERN.sub(replacer, data)
    else:
        return data


def _as_bool(value: Any) -> bool:
    # bool('false') would be True
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise InvalidConfigurationError(f"'{CONFIG_SECTION}.{name}' must be a mapping")
    return value


def options_from_dict(data: Dict[str, Any]) -> TokenCredentialOptions:
    """
    Build credential options from an ``identity`` config mapping.

    Raises:
        InvalidConfigurationError: Invalid or conflicting values
    """
    authority_host = data.get("authority_host") or None
    cloud = data.get("cloud") or None
    if authority_host and cloud:
        raise InvalidConfigurationError("Set either 'authority_host' or 'cloud', not both")
    if cloud:
        authority_host = authority_host_for_cloud(cloud)

    retry_data = _section(data, "retry")
    log_data = _section(data, "logging")
    telemetry_data = _section(data, "telemetry")

    try:
        log_options = RequestLogOptions(
            include_body=_as_bool(log_data.get("include_body", False)),
            slow_request_threshold=float(log_data.get("slow_request_threshold", 5.0)),
        )
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid logging options: {e}") from e

    return TokenCredentialOptions(
        authority_host=authority_host,
        log_options=log_options,
        retry=RetryOptions.from_dict(retry_data) if retry_data else None,
        telemetry=TelemetryOptions(
            application_id=telemetry_data.get("application_id") or None,
            disabled=_as_bool(telemetry_data.get("disabled", False)),
        ),
    )


def load_credential_options(path: Path | str) -> TokenCredentialOptions:
    """
    Load credential options from a YAML file.

    A missing file or a file without an ``identity`` section yields default
    options. The authority host is not resolved here; pass the result to
    ``resolve_options``.
    """
    path = Path(path)
    raw = load_yaml(path)
    if not path.exists():
        logger.debug("Config file not found, using default options", extra={"config_path": str(path)})

    section = raw.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{CONFIG_SECTION}' section in {path} must be a mapping")

    return options_from_dict(_expand_env_vars(section))


__all__ = [
    "CONFIG_SECTION",
    "load_credential_options",
    "load_yaml",
    "options_from_dict",
]
