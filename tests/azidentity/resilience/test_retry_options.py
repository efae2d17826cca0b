"""Tests for retry options and Retry-After parsing."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime
from unittest.mock import patch

import pytest

from azidentity.errors.exceptions import InvalidConfigurationError
from azidentity.resilience.retry import (
    DEFAULT_RETRY_OPTIONS,
    MSI_RETRY_OPTIONS,
    MSI_STATUS_CODES_FOR_RETRY,
    STATUS_CODES_FOR_RETRY,
    RetryOptions,
    parse_retry_after,
)


class TestDefaults:
    def test_general_defaults(self):
        opts = RetryOptions()
        assert opts.max_retries == 3
        assert opts.max_tries == 4
        assert opts.retry_delay == 4.0
        assert opts.max_retry_delay == 120.0
        assert opts.try_timeout == 60.0
        assert opts.status_codes == frozenset({408, 429, 500, 502, 503, 504})
        assert DEFAULT_RETRY_OPTIONS == opts

    def test_msi_settings(self):
        assert MSI_RETRY_OPTIONS.max_retries == 4
        assert MSI_RETRY_OPTIONS.retry_delay == 2.0
        assert MSI_RETRY_OPTIONS.try_timeout == 60.0
        assert MSI_RETRY_OPTIONS.status_codes == MSI_STATUS_CODES_FOR_RETRY

    def test_msi_codes_cover_startup_responses(self):
        assert {404, 410} <= MSI_STATUS_CODES_FOR_RETRY
        assert 404 not in STATUS_CODES_FOR_RETRY
        assert 410 not in STATUS_CODES_FOR_RETRY

    def test_msi_codes_exact(self):
        assert MSI_STATUS_CODES_FOR_RETRY == frozenset(
            {408, 429, 500, 502, 504, 404, 410, 501, 505, 506, 507, 508, 510, 511}
        )
        assert 503 not in MSI_STATUS_CODES_FOR_RETRY

    def test_immutable(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_RETRY_OPTIONS.max_retries = 10


class TestValidation:
    def test_coerces_strings(self):
        opts = RetryOptions(max_retries="2", retry_delay="1.5", status_codes=["429", 503])
        assert opts.max_retries == 2
        assert opts.retry_delay == 1.5
        assert opts.status_codes == frozenset({429, 503})

    def test_zero_retries_allowed(self):
        assert RetryOptions(max_retries=0).max_tries == 1

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_retries": -1},
            {"retry_delay": -0.5},
            {"retry_delay": 10, "max_retry_delay": 5},
            {"try_timeout": 0},
            {"max_retries": "many"},
            {"status_codes": ["abc"]},
            {"retry_delay": float("nan")},
            {"max_retry_delay": float("inf")},
            {"try_timeout": float("nan")},
            {"try_timeout": "nan"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidConfigurationError):
            RetryOptions(**kwargs)

    def test_from_dict(self):
        opts = RetryOptions.from_dict({"max_retries": 1, "try_timeout": 5})
        assert opts.max_retries == 1
        assert opts.try_timeout == 5.0

    def test_from_dict_none(self):
        assert RetryOptions.from_dict(None) == RetryOptions()

    def test_from_dict_unknown_key(self):
        with pytest.raises(InvalidConfigurationError, match="backoff"):
            RetryOptions.from_dict({"backoff": 2})


class TestGetDelay:
    def test_exponential_growth(self):
        opts = RetryOptions(retry_delay=1.0, max_retry_delay=100.0)
        with patch("azidentity.resilience.retry.random.uniform", return_value=1.0):
            assert [opts.get_delay(n) for n in (1, 2, 3, 4)] == [1.0, 3.0, 7.0, 15.0]

    def test_jitter_bounds(self):
        opts = RetryOptions(retry_delay=1.0, max_retry_delay=100.0)
        for _ in range(50):
            assert 0.8 * 3.0 <= opts.get_delay(2) <= 1.3 * 3.0

    def test_capped(self):
        opts = RetryOptions(retry_delay=4.0, max_retry_delay=10.0)
        assert opts.get_delay(6) == 10.0

    def test_zero_delay(self):
        opts = RetryOptions(retry_delay=0, max_retry_delay=0)
        assert opts.get_delay(3) == 0.0

    def test_should_retry_status(self):
        assert DEFAULT_RETRY_OPTIONS.should_retry_status(503)
        assert not DEFAULT_RETRY_OPTIONS.should_retry_status(400)
        assert MSI_RETRY_OPTIONS.should_retry_status(404)


class TestParseRetryAfter:
    def test_seconds(self):
        assert parse_retry_after("3") == 3.0
        assert parse_retry_after(" 1.5 ") == 1.5

    def test_negative_clamped(self):
        assert parse_retry_after("-5") == 0.0

    def test_missing(self):
        assert parse_retry_after(None) is None
        assert parse_retry_after("") is None

    def test_garbage(self):
        assert parse_retry_after("soon") is None

    def test_non_finite_ignored(self):
        assert parse_retry_after("nan") is None
        assert parse_retry_after("inf") is None
        assert parse_retry_after("-Infinity") is None

    def test_http_date(self):
        when = datetime.now(UTC) + timedelta(seconds=30)
        seconds = parse_retry_after(format_datetime(when, usegmt=True))
        assert 25 <= seconds <= 30

    def test_past_http_date(self):
        assert parse_retry_after("Wed, 21 Oct 2015 07:28:00 GMT") == 0.0
