"""Request and response models passed through a pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, TypeVar
from urllib.parse import urlencode

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _find_header(headers: dict[str, str], name: str) -> str | None:
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None


@dataclass
class Request:
    """
    Outbound HTTP request.

    Attributes:
        method: HTTP method
        url: Absolute request URL
        headers: Request headers (lookups via ``get_header`` are case-insensitive)
        body: Encoded request body, if any
        deadline: Absolute ``loop.time()`` after which no attempt may start
        telemetry: Free-form metadata stages attach for logging
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None
    deadline: float | None = None
    telemetry: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def form(
        cls,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
        deadline: float | None = None,
    ) -> "Request":
        """Build a POST with a form-encoded body, the shape of every token request."""
        merged = {"Content-Type": FORM_CONTENT_TYPE}
        merged.update(headers or {})
        return cls(
            method="POST",
            url=url,
            headers=merged,
            body=urlencode(data).encode("utf-8"),
            deadline=deadline,
        )

    def get_header(self, name: str) -> str | None:
        return _find_header(self.headers, name)

    def set_header(self, name: str, value: str) -> None:
        for key in list(self.headers):
            if key.lower() == name.lower():
                del self.headers[key]
        self.headers[name] = value

    def copy(self) -> "Request":
        """Copy with independent header and telemetry dicts (one per attempt)."""
        return replace(self, headers=dict(self.headers), telemetry=dict(self.telemetry))


@dataclass(frozen=True)
class Response:
    """
    Completed HTTP response with the body already read.

    The originating request is kept so error classification can report what
    was sent without copying it.
    """

    status: int
    reason: str
    headers: dict[str, str]
    body: bytes
    request: Request

    @property
    def status_line(self) -> str:
        """Status code and reason phrase, e.g. ``"429 Too Many Requests"``."""
        if self.reason:
            return f"{self.status} {self.reason}"
        return str(self.status)

    def get_header(self, name: str) -> str | None:
        return _find_header(self.headers, name)

    def has_status(self, *status_codes: int) -> bool:
        return self.status in status_codes

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def unmarshal_as_json(self, model: type[ModelT]) -> ModelT:
        """
        Parse the body as JSON into a pydantic model.

        Raises:
            pydantic.ValidationError: Body is not JSON or does not fit the model
        """
        return model.model_validate_json(self.body)


__all__ = ["FORM_CONTENT_TYPE", "Request", "Response"]
