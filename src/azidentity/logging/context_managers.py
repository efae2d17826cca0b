"""Context managers for structured logging."""

from typing import Dict, Optional

from azidentity.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(request_id=request_id):
            # All logs in this block carry the request id
            await next(request)
    """

    def __init__(
        self,
        request_id: Optional[str] = None,
        credential: Optional[str] = None,
        try_number: Optional[int] = None,
    ):
        self.new_context = {
            "request_id": request_id,
            "credential": credential,
            "try_number": try_number,
        }
        self.old_context: Dict[str, object] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        set_log_context(**self.new_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_log_context(**self.old_context)
        return False
