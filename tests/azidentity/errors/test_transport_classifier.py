"""Tests for transport error classification."""

import asyncio
import json

import aiohttp
import pytest

from azidentity.errors.classifiers import classify_transport_error, is_transient_transport_error
from azidentity.errors.exceptions import AuthenticationFailedError, CredentialUnavailableError
from azidentity.types import ErrorCategory


class TestClassifyTransportError:
    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("connection reset"),
            aiohttp.ServerDisconnectedError(),
            aiohttp.ClientPayloadError("truncated body"),
            aiohttp.ClientOSError(104, "Connection reset by peer"),
            TimeoutError(),
            asyncio.TimeoutError(),
            ConnectionResetError("reset"),
            OSError("network unreachable"),
        ],
    )
    def test_transient(self, error):
        assert classify_transport_error(error) == ErrorCategory.TRANSIENT
        assert is_transient_transport_error(error) is True

    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.InvalidURL("not a url"),
            json.JSONDecodeError("Expecting value", "", 0),
            ValueError("bad value"),
            TypeError("bad type"),
        ],
    )
    def test_permanent(self, error):
        assert classify_transport_error(error) == ErrorCategory.PERMANENT
        assert is_transient_transport_error(error) is False

    def test_cancellation_is_permanent(self):
        assert classify_transport_error(asyncio.CancelledError()) == ErrorCategory.PERMANENT

    def test_identity_errors_are_terminal(self):
        assert (
            classify_transport_error(CredentialUnavailableError("X", "missing"))
            == ErrorCategory.PERMANENT
        )
        assert (
            classify_transport_error(AuthenticationFailedError(ConnectionResetError()))
            == ErrorCategory.PERMANENT
        )

    def test_non_retriable_marker(self):
        class Terminal(Exception):
            is_retryable = False

        assert classify_transport_error(Terminal()) == ErrorCategory.PERMANENT

    def test_other_client_errors_are_transient(self):
        assert classify_transport_error(aiohttp.ClientError("other")) == ErrorCategory.TRANSIENT

    def test_unknown(self):
        assert classify_transport_error(RuntimeError("odd")) == ErrorCategory.UNKNOWN
        assert is_transient_transport_error(RuntimeError("odd")) is False
