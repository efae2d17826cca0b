"""
pytest configuration for azidentity tests.

Adds src directory to Python path for imports and provides a scripted
transport that stands in for the network.
"""

import sys
from http import HTTPStatus
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from azidentity.pipeline.request import Request, Response  # noqa: E402


def build_response(
    request: Request,
    status: int,
    body: bytes | str = b"",
    headers: dict[str, str] | None = None,
    reason: str | None = None,
) -> Response:
    if isinstance(body, str):
        body = body.encode("utf-8")
    if reason is None:
        try:
            reason = HTTPStatus(status).phrase
        except ValueError:
            reason = ""
    return Response(status=status, reason=reason, headers=headers or {}, body=body, request=request)


class ScriptedTransport:
    """
    Transport returning scripted outcomes in order.

    Each outcome is an exception instance (raised) or a tuple of
    (status[, body[, headers]]). The last outcome repeats once the script
    runs out.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [(200, b"{}")]
        self.requests: list[Request] = []
        self.closed = False

    async def send(self, request: Request) -> Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return build_response(request, *outcome)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def scripted_transport():
    """Factory for ScriptedTransport instances."""
    return ScriptedTransport


@pytest.fixture
def make_response():
    """Factory building a Response for a throwaway POST request."""

    def _make(status, body=b"", headers=None, reason=None):
        request = Request(method="POST", url="https://login.example.com/tenant/oauth2/token")
        return build_response(request, status, body, headers, reason)

    return _make


@pytest.fixture
def token_request():
    return Request.form(
        "https://login.microsoftonline.com/my-tenant/oauth2/v2.0/token",
        {
            "grant_type": "client_credentials",
            "client_id": "app-id",
            "client_secret": "s3cr3t",
            "scope": "https://management.azure.com/.default",
        },
    )
