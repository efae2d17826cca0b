"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any, Callable

from azidentity.logging.context import get_log_context

# Query parameters and form fields that carry secrets
SENSITIVE_PARAMS_PATTERN = re.compile(
    r"([?&]|^)(client_secret|client_assertion|assertion|password|refresh_token|"
    r"code|sig|token|secret)=[^&]*",
    re.IGNORECASE,
)


def redact_secrets(value: str) -> str:
    """Redact secret-bearing parameters in a URL or form-encoded body."""
    return SENSITIVE_PARAMS_PATTERN.sub(r"\1\2=[REDACTED]", value)


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Known ``extra`` fields are copied with a stable type; fields that may
    hold URLs or request bodies are redacted before output.
    """

    # extra field -> type it is coerced to (None keeps the value as given)
    STRUCTURED_FIELDS: dict[str, Callable[[Any], Any] | None] = {
        # Correlation with the provider
        "request_id": None,
        "correlation_id": None,
        "trace_id": None,
        # HTTP exchange
        "http_method": None,
        "http_url": None,
        "http_status": int,
        "duration_ms": float,
        "request_body": None,
        "response_body": None,
        # Failures
        "error_category": None,
        "error_type": None,
        "error_message": None,
        # Retry stage
        "attempt": int,
        "max_attempts": int,
        "delay_seconds": float,
        "delay_source": None,
        "server_retry_after": float,
        "try_timeout": float,
        # Credential setup
        "authority_host": None,
        "credential_type": None,
    }

    REDACTED_FIELDS = frozenset({"http_url", "authority_host", "request_body"})

    def _field_value(self, name: str, value: Any) -> Any:
        coerce = self.STRUCTURED_FIELDS[name]
        if coerce is not None:
            try:
                value = coerce(value)
            except (TypeError, ValueError):
                # Null rather than a mistyped value
                return None
        if name in self.REDACTED_FIELDS and isinstance(value, str):
            return redact_secrets(value)
        return value

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, UTC)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self._timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Context first so an explicit extra field of the same name wins
        entry.update({key: value for key, value in get_log_context().items() if value})

        if record.levelno >= logging.ERROR or record.levelno == logging.DEBUG:
            entry["file"] = f"{record.filename}:{record.lineno}"

        for name in self.STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = self._field_value(name, value)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Lines look like ``2024-01-01 12:00:00 - INFO - [Cred] - [1a2b3c4d try:2] message``.
    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _level(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno) if self._use_colors else None
        return f"{color}{record.levelname}{self.RESET}" if color else record.levelname

    def format(self, record: logging.LogRecord) -> str:
        context = get_log_context()

        head = [datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"), self._level(record)]
        if context["credential"]:
            head.append(f"[{context['credential']}]")

        tags = []
        request_id = getattr(record, "request_id", None) or context["request_id"]
        if request_id:
            tags.append(str(request_id)[:8])
        if context["try_number"]:
            tags.append(f"try:{context['try_number']}")

        message = record.getMessage()
        if tags:
            message = f"[{' '.join(tags)}] {message}"
        return f"{' - '.join(head)} - {message}"
