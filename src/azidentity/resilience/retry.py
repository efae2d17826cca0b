"""
Retry configuration for the pipeline retry stage.

RetryOptions is immutable: a pipeline captures it at construction time and
concurrent requests read it without locking.
"""

import logging
import math
import random
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from azidentity.errors.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)

# Status codes retried by the general pipeline
STATUS_CODES_FOR_RETRY = frozenset(
    {
        408,  # Request Timeout
        429,  # Too Many Requests
        500,  # Internal Server Error
        502,  # Bad Gateway
        503,  # Service Unavailable
        504,  # Gateway Timeout
    }
)

# Status codes retried against managed identity endpoints. 404 and 410 are
# returned while the local metadata endpoint is still starting up.
MSI_STATUS_CODES_FOR_RETRY = frozenset(
    {
        408,
        429,
        500,
        502,
        504,
        404,
        410,
        # all remaining 5xx
        501,
        505,
        506,
        507,
        508,
        510,
        511,
    }
)


@dataclass(frozen=True)
class RetryOptions:
    """
    Retry behavior of a pipeline.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        retry_delay: Base delay in seconds between attempts
        max_retry_delay: Upper bound in seconds for any single delay
        try_timeout: Seconds allowed for a single attempt
        status_codes: Response status codes that trigger a retry
    """

    max_retries: int = 3
    retry_delay: float = 4.0
    max_retry_delay: float = 120.0
    try_timeout: float = 60.0
    status_codes: frozenset[int] = field(default=STATUS_CODES_FOR_RETRY)

    def __post_init__(self):
        """Coerce and validate values (they may come from YAML/env vars)."""
        try:
            object.__setattr__(self, "max_retries", int(self.max_retries))
            object.__setattr__(self, "retry_delay", float(self.retry_delay))
            object.__setattr__(self, "max_retry_delay", float(self.max_retry_delay))
            object.__setattr__(self, "try_timeout", float(self.try_timeout))
            object.__setattr__(
                self, "status_codes", frozenset(int(code) for code in self.status_codes)
            )
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid retry options: {e}") from e

        for name in ("retry_delay", "max_retry_delay", "try_timeout"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfigurationError(f"{name} must be a finite number")
        if self.max_retries < 0:
            raise InvalidConfigurationError("max_retries must be >= 0")
        if self.retry_delay < 0:
            raise InvalidConfigurationError("retry_delay must be >= 0")
        if self.max_retry_delay < self.retry_delay:
            raise InvalidConfigurationError("max_retry_delay must be >= retry_delay")
        if self.try_timeout <= 0:
            raise InvalidConfigurationError("try_timeout must be > 0")

    @property
    def max_tries(self) -> int:
        return self.max_retries + 1

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "RetryOptions":
        """Build options from a config mapping; unknown keys are rejected."""
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown retry option(s): {', '.join(sorted(unknown))}"
            )
        return cls(**data)

    def should_retry_status(self, status_code: int) -> bool:
        return status_code in self.status_codes

    def get_delay(self, try_number: int) -> float:
        """
        Delay before the next attempt.

        Exponential in the 1-based number of the try that just failed, with
        jitter in [0.8, 1.3) to spread synchronized retries.

        Args:
            try_number: 1-based number of the failed try

        Returns:
            Delay in seconds, capped at max_retry_delay
        """
        delay = ((2**try_number) - 1) * self.retry_delay
        delay *= random.uniform(0.8, 1.3)
        return min(delay, self.max_retry_delay)


def parse_retry_after(value: str | None) -> float | None:
    """
    Parse a Retry-After header given in seconds or as an HTTP date.

    Returns:
        Seconds to wait, or None if absent or unparseable
    """
    if not value:
        return None
    value = value.strip()
    try:
        seconds = float(value)
    except ValueError:
        pass
    else:
        # float() accepts "nan" and "inf"
        return max(seconds, 0.0) if math.isfinite(seconds) else None
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable Retry-After header", extra={"retry_after": value})
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=UTC)
    return max((when - datetime.now(UTC)).total_seconds(), 0.0)


DEFAULT_RETRY_OPTIONS = RetryOptions()

# Managed identity retry settings are not user-configurable
MSI_RETRY_OPTIONS = RetryOptions(
    max_retries=4,
    retry_delay=2.0,
    try_timeout=60.0,
    status_codes=MSI_STATUS_CODES_FOR_RETRY,
)


__all__ = [
    "DEFAULT_RETRY_OPTIONS",
    "MSI_RETRY_OPTIONS",
    "MSI_STATUS_CODES_FOR_RETRY",
    "STATUS_CODES_FOR_RETRY",
    "RetryOptions",
    "parse_retry_after",
]
