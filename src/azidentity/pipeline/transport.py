"""
Default HTTP transport using aiohttp.

The transport is the innermost link of a pipeline: it performs one network
round trip and does no retrying, classification or logging of its own.
"""

import asyncio
import logging

import aiohttp

from azidentity.errors.exceptions import InvalidConfigurationError
from azidentity.pipeline.request import Request, Response

logger = logging.getLogger(__name__)


def create_session(
    max_connections: int = 100,
    max_connections_per_host: int = 10,
    enable_ssl: bool = True,
    timeout_connect: int = 30,
    timeout_sock_read: int = 60,
) -> aiohttp.ClientSession:
    """
    Create aiohttp ClientSession with connection pooling and timeouts.

    No total timeout is set here: the retry stage bounds each attempt with
    its try timeout.

    Args:
        max_connections: Total connection pool size (default: 100)
        max_connections_per_host: Per-host connection limit (default: 10)
        enable_ssl: Enable SSL verification (default: True)
        timeout_connect: Connection timeout in seconds (default: 30)
        timeout_sock_read: Socket read timeout in seconds (default: 60)

    Returns:
        Configured aiohttp.ClientSession
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,
        limit_per_host=max_connections_per_host,
        ssl=enable_ssl,
        ttl_dns_cache=300,
    )

    timeout = aiohttp.ClientTimeout(
        total=None,
        connect=timeout_connect,
        sock_read=timeout_sock_read,
    )

    return aiohttp.ClientSession(connector=connector, timeout=timeout)


class AiohttpTransport:
    """
    Transport backed by a lazily created aiohttp session.

    One session is shared by every request sent through the transport. Use
    as an async context manager, or call ``close()`` when done.

    The session and its creation lock belong to the event loop that first
    sends through the transport; using it from another loop raises
    InvalidConfigurationError. Build one pipeline (and transport) per event
    loop, e.g. one per worker thread.
    """

    def __init__(self, session: aiohttp.ClientSession | None = None, **session_kwargs):
        """
        Initialize transport.

        Args:
            session: Existing session to use; the caller keeps ownership of it
            **session_kwargs: Passed to create_session when the transport
                creates its own session
        """
        self._session = session
        self._owns_session = session is None
        self._session_kwargs = session_kwargs
        self._session_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP client session."""
        loop = asyncio.get_running_loop()
        if self._loop is None:
            self._loop = loop
        elif self._loop is not loop:
            raise InvalidConfigurationError(
                "AiohttpTransport is bound to another event loop; "
                "create one pipeline per event loop"
            )
        if self._session is not None and not self._session.closed:
            return self._session
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = create_session(**self._session_kwargs)
                self._owns_session = True
        return self._session

    async def send(self, request: Request) -> Response:
        session = await self._ensure_session()
        async with session.request(
            request.method,
            request.url,
            headers=request.headers,
            data=request.body,
            allow_redirects=False,
        ) as response:
            body = await response.read()
            return Response(
                status=response.status,
                reason=response.reason or "",
                headers=dict(response.headers),
                body=body,
                request=request,
            )

    async def close(self) -> None:
        """Close the HTTP client session if this transport created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def default_transport() -> AiohttpTransport:
    """Transport used when options do not supply one."""
    return AiohttpTransport()


__all__ = ["AiohttpTransport", "create_session", "default_transport"]
