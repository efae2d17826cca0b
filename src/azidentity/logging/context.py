"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_credential: ContextVar[str] = ContextVar("credential", default="")
_try_number: ContextVar[int] = ContextVar("try_number", default=0)


def set_log_context(
    request_id: Optional[str] = None,
    credential: Optional[str] = None,
    try_number: Optional[int] = None,
) -> None:
    if request_id is not None:
        _request_id.set(request_id)
    if credential is not None:
        _credential.set(credential)
    if try_number is not None:
        _try_number.set(try_number)


def get_log_context() -> Dict[str, object]:
    return {
        "request_id": _request_id.get(),
        "credential": _credential.get(),
        "try_number": _try_number.get(),
    }


def clear_log_context() -> None:
    _request_id.set("")
    _credential.set("")
    _try_number.set(0)
