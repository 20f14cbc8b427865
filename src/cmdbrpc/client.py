"""Batch request engine for the CMDB JSON-RPC API.

ApiClient is the only component that talks to the transport. It offers two
operations that every namespace wrapper builds on:

- ``request``: one call, one round trip, result or raised error.
- ``batch_request``: N calls, still one round trip. Responses are matched
  back to calls by id and returned in call order, whatever order the server
  used. Per-call application errors are returned inline, not raised.

Example:
    ```python
    config = ClientConfig(url="https://cmdb.example.com/src/jsonrpc.php", api_key="c1ia5q")
    async with ApiClient(config) as api:
        version = await api.request("idoit.version")
        results = await api.batch_request([
            Call("cmdb.object.read", {"id": 1}),
            Call("cmdb.object.read", {"id": 2}),
        ])
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Self

from cmdbrpc import wire
from cmdbrpc.config import ClientConfig
from cmdbrpc.error import RpcError
from cmdbrpc.ids import IdAllocator
from cmdbrpc.transport import HttpTransport, Transport
from cmdbrpc.wire import Call, Envelope, RpcResult

logger = logging.getLogger(__name__)

SESSION_HEADER = "X-RPC-Auth-Session"
USERNAME_HEADER = "X-RPC-Auth-Username"
PASSWORD_HEADER = "X-RPC-Auth-Password"


class ApiClient:
    """JSON-RPC client with single and batch requests.

    Args:
        config: Endpoint, credentials and timeout
        transport: Optional transport; defaults to an HttpTransport for
            ``config.url``
        ids: Optional id allocator; share one between clients only if their
            ids must not collide
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Transport | None = None,
        ids: IdAllocator | None = None,
    ) -> None:
        self.config = config
        if transport is None:
            transport = HttpTransport(
                config.url,
                timeout=config.timeout,
                headers=config.headers,
            )
        self._transport = transport
        self._ids = ids if ids is not None else IdAllocator()
        self._session_id: str | None = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Log out if logged in, then release the transport."""
        try:
            if self._session_id is not None:
                await self.logout()
        finally:
            await self._transport.close()

    @property
    def ids(self) -> IdAllocator:
        return self._ids

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def is_logged_in(self) -> bool:
        return self._session_id is not None

    # Single requests

    async def request(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform one call and return its result.

        Raises:
            InvalidArgument: If method or params are malformed
            TransportFault: If the HTTP exchange fails
            ProtocolFault: If the response is not a valid answer
            ApplicationFault: If the server reports an error for the call
        """
        return await self._call(method, params)

    async def _call(
        self,
        method: str,
        params: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        call = Call.coerce({"method": method, "params": params})
        envelope = self._envelope(call, self._ids.next_id())

        logger.debug("Sending %s (id %d)", envelope.method, envelope.id)
        doc = await self._round_trip(envelope, headers)
        result = wire.decode_single(doc)

        if result.id != envelope.id:
            raise RpcError.protocol(
                f"Response id {result.id} does not match request id {envelope.id}"
            )
        return result.unwrap()

    # Batch requests

    async def batch_request(self, calls: Iterable[Call | Mapping[str, Any]]) -> list[RpcResult]:
        """Perform several calls in a single round trip.

        Args:
            calls: Calls as Call objects or ``{"method", "params"}`` mappings

        Returns:
            One Success or Failure per call, in the order of ``calls``

        Raises:
            InvalidArgument: If ``calls`` is empty or contains a malformed call
            TransportFault: If the HTTP exchange fails; no partial results
            ProtocolFault: If the response is malformed, misses an id or
                carries an id that was not sent
        """
        normalized = [Call.coerce(call) for call in calls]
        if not normalized:
            raise RpcError.invalid_argument("Batch request needs at least one call")

        ids = self._ids.reserve(len(normalized))
        envelopes = [self._envelope(call, id) for call, id in zip(normalized, ids)]
        positions = {envelope.id: index for index, envelope in enumerate(envelopes)}

        logger.debug(
            "Sending batch of %d calls (ids %d-%d)",
            len(envelopes), ids[0], ids[-1],
        )
        doc = await self._round_trip(envelopes)
        results = wire.decode_batch(doc)

        ordered: list[RpcResult | None] = [None] * len(envelopes)
        for result in results:
            index = positions.get(result.id)
            if index is None:
                raise RpcError.protocol(
                    f"Response carries id {result.id} which was not sent in this batch"
                )
            if ordered[index] is not None:
                raise RpcError.protocol(f"Response carries id {result.id} more than once")
            ordered[index] = result

        missing = [envelope.id for envelope, result in zip(envelopes, ordered) if result is None]
        if missing:
            raise RpcError.protocol(
                f"Response is missing id(s) {', '.join(str(id) for id in missing)}"
            )

        failed = sum(1 for result in ordered if not result.ok)
        if failed:
            logger.debug("Batch finished with %d failed call(s)", failed)
        return ordered

    async def batch_request_values(
        self,
        calls: Iterable[Call | Mapping[str, Any]],
    ) -> list[Any]:
        """Like batch_request, but unwrap every result.

        Raises:
            ApplicationFault: For the first failed call, in call order
        """
        results = await self.batch_request(calls)
        return [result.unwrap() for result in results]

    # Session handling

    async def login(self) -> str:
        """Open a session with the configured user name and password.

        Returns:
            The session id, also sent with every following request
        """
        if not self.config.username or not self.config.password:
            raise RpcError.invalid_argument("Login needs a username and a password")

        result = await self._call(
            "idoit.login",
            None,
            {
                USERNAME_HEADER: self.config.username,
                PASSWORD_HEADER: self.config.password,
            },
        )
        session_id = result.get("session-id") if isinstance(result, dict) else None
        if not isinstance(session_id, str) or not session_id:
            raise RpcError.protocol("Login response carries no session id")

        self._session_id = session_id
        logger.info("Logged in as %s", self.config.username)
        return session_id

    async def logout(self) -> None:
        """Close the current session."""
        if self._session_id is None:
            raise RpcError.invalid_argument("Not logged in")
        try:
            await self._call("idoit.logout", None)
        finally:
            self._session_id = None
        logger.info("Logged out")

    # Internals

    def _envelope(self, call: Call, id: int) -> Envelope:
        params = dict(call.params)
        params["apikey"] = self.config.api_key
        if self.config.language is not None:
            params["language"] = self.config.language
        return wire.encode(call.method, params, id)

    async def _round_trip(
        self,
        payload: Envelope | list[Envelope],
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        body = wire.serialize(payload)

        request_headers: dict[str, str] = {}
        if self._session_id is not None:
            request_headers[SESSION_HEADER] = self._session_id
        if headers:
            request_headers.update(headers)

        try:
            raw = await self._transport.send(body, request_headers or None)
        except RpcError:
            raise
        except TimeoutError as e:
            raise RpcError.transport(f"RPC request timed out: {e}") from e
        except OSError as e:
            raise RpcError.transport(f"RPC request failed: {e}") from e

        return wire.parse_body(raw)
