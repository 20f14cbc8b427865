"""HTTP transport for the JSON-RPC client.

The engine only needs one blocking operation: POST a body, get a body
back. Anything that implements the Transport protocol can be plugged in
(tests use an in-memory fake).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Protocol

import aiohttp

from cmdbrpc.error import RpcError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Protocol for request/response transports."""

    async def send(
        self,
        body: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        """Send a request body and return the raw response body.

        Args:
            body: The serialized JSON-RPC request
            headers: Extra headers for this request only

        Raises:
            TransportFault: If the exchange fails
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""
        ...


class HttpTransport:
    """POSTs JSON documents to a fixed URL with aiohttp.

    The aiohttp ClientSession is created lazily on the first send, so the
    transport can be constructed outside of a running event loop. A session
    passed in by the caller is used as is and not closed by ``close()``.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
        http_client: aiohttp.ClientSession | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._headers = {"Content-Type": "application/json"}
        if headers:
            self._headers.update(headers)
        self._session = http_client
        self._own_session = http_client is None

    async def send(
        self,
        body: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        if self._session is None:
            self._session = aiohttp.ClientSession()

        request_headers = dict(self._headers)
        if headers:
            request_headers.update(headers)

        try:
            async with self._session.post(
                self.url,
                data=body,
                headers=request_headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                data = await response.read()
                if not 200 <= response.status < 300:
                    text = data.decode("utf-8", errors="replace")
                    logger.warning(
                        "RPC request to %s failed: %d %s",
                        self.url, response.status, response.reason,
                    )
                    raise RpcError.transport(
                        f"RPC request failed: {response.status} {response.reason} - {text}",
                        status=response.status,
                    )
                return data
        except asyncio.TimeoutError as e:
            raise RpcError.transport(
                f"RPC request to {self.url} timed out after {self.timeout}s"
            ) from e
        except aiohttp.ClientError as e:
            raise RpcError.transport(f"RPC request to {self.url} failed: {e}") from e

    async def close(self) -> None:
        if self._session is not None and self._own_session:
            await self._session.close()
            self._session = None
