"""
Request pipeline.

Every request to the identity provider flows through a Pipeline: an ordered
chain of policies (telemetry, request id, retry, request log) wrapping a
transport.

Basic Usage:
    from azidentity.pipeline import Request, new_default_pipeline

    async with new_default_pipeline() as pipeline:
        response = await pipeline.run(Request.form(token_url, form_data))
"""

from azidentity.pipeline.base import Pipeline
from azidentity.pipeline.factory import new_default_msi_pipeline, new_default_pipeline
from azidentity.pipeline.policies import (
    REQUEST_ID_HEADER,
    USER_AGENT_HEADER,
    RequestLogPolicy,
    RetryPolicy,
    TelemetryPolicy,
    UniqueRequestIDPolicy,
)
from azidentity.pipeline.request import Request, Response
from azidentity.pipeline.transport import AiohttpTransport, create_session

__all__ = [
    # Pipeline
    "Pipeline",
    "new_default_pipeline",
    "new_default_msi_pipeline",
    # Policies
    "TelemetryPolicy",
    "UniqueRequestIDPolicy",
    "RetryPolicy",
    "RequestLogPolicy",
    "REQUEST_ID_HEADER",
    "USER_AGENT_HEADER",
    # Models
    "Request",
    "Response",
    # Transport
    "AiohttpTransport",
    "create_session",
]
