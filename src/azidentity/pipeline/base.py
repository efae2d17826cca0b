"""Request pipeline: an ordered chain of policies ending in a transport."""

import logging
from functools import partial

from azidentity.errors.exceptions import InvalidConfigurationError
from azidentity.pipeline.request import Request, Response
from azidentity.types import NextHandler, Policy, Transport

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Ordered chain of policies wrapping a transport.

    The chain is composed once at construction: each policy is bound to a
    handle for the remainder of the pipeline. A pipeline holds no mutable
    state, so one instance can serve any number of concurrent requests.
    """

    def __init__(self, transport: Transport, *policies: Policy):
        """
        Initialize pipeline.

        Args:
            transport: Innermost link performing the network call
            *policies: Stages, outermost first

        Raises:
            InvalidConfigurationError: Transport or a policy is unusable
        """
        if transport is None or not callable(getattr(transport, "send", None)):
            raise InvalidConfigurationError("Pipeline requires a transport with a send() method")
        for policy in policies:
            if not callable(getattr(policy, "send", None)):
                raise InvalidConfigurationError(
                    f"Pipeline policy {type(policy).__name__} has no send() method"
                )

        self._transport = transport
        self._policies = tuple(policies)

        handler: NextHandler = transport.send
        for policy in reversed(self._policies):
            handler = partial(policy.send, next=handler)
        self._handler = handler

        logger.debug(
            "Built pipeline",
            extra={"policies": [type(p).__name__ for p in self._policies]},
        )

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def policies(self) -> tuple[Policy, ...]:
        return self._policies

    async def run(self, request: Request) -> Response:
        """
        Send a request through every stage.

        The caller's request is copied first and never modified.

        Returns:
            Final response, whatever its status

        Raises:
            Exception: Transport error left after the retry stage gave up
        """
        return await self._handler(request.copy())

    async def close(self) -> None:
        """Close the transport if it supports closing."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "Pipeline":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = ["Pipeline"]
