"""Pytest configuration for all tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from cmdbrpc.client import ApiClient
from cmdbrpc.config import ClientConfig
from cmdbrpc.error import ApplicationFault

API_URL = "http://cmdb.test/src/jsonrpc.php"
API_KEY = "c1ia5q"


class FakeTransport:
    """In-memory transport answering JSON-RPC requests through routes.

    ``routes`` maps a method name to either a fixed result or a callable
    taking the call's params. A callable may raise ApplicationFault to
    produce an ``error`` response. Unknown methods answer with -32601.

    ``rewrite`` lets a test reorder, drop or inject response objects of a
    batch before they are serialized.
    """

    def __init__(self, routes: Mapping[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[Any] = []
        self.headers: list[dict[str, str]] = []
        self.rewrite: Callable[[list[dict[str, Any]]], list[dict[str, Any]]] | None = None
        self.error: Exception | None = None
        self.raw_response: bytes | None = None
        self.closed = False

    @property
    def send_count(self) -> int:
        return len(self.requests)

    def calls(self) -> list[tuple[str, dict[str, Any]]]:
        """All (method, params) pairs sent so far, batches flattened."""
        flat = []
        for doc in self.requests:
            for envelope in doc if isinstance(doc, list) else [doc]:
                flat.append((envelope["method"], envelope["params"]))
        return flat

    def ids(self) -> list[int]:
        flat = []
        for doc in self.requests:
            for envelope in doc if isinstance(doc, list) else [doc]:
                flat.append(envelope["id"])
        return flat

    async def send(self, body: bytes, headers: Mapping[str, str] | None = None) -> bytes:
        doc = json.loads(body)
        self.requests.append(doc)
        self.headers.append(dict(headers or {}))

        if self.error is not None:
            raise self.error
        if self.raw_response is not None:
            return self.raw_response

        if isinstance(doc, list):
            responses: Any = [self._answer(envelope) for envelope in doc]
            if self.rewrite is not None:
                responses = self.rewrite(responses)
        else:
            responses = self._answer(doc)
            if self.rewrite is not None:
                responses = self.rewrite([responses])[0]
        return json.dumps(responses).encode("utf-8")

    async def close(self) -> None:
        self.closed = True

    def _answer(self, envelope: dict[str, Any]) -> dict[str, Any]:
        method = envelope["method"]
        if method not in self.routes:
            return {
                "id": envelope["id"],
                "error": {"code": -32601, "message": f"Method not found: {method}"},
            }

        route = self.routes[method]
        try:
            result = route(envelope["params"]) if callable(route) else route
        except ApplicationFault as e:
            return {
                "id": envelope["id"],
                "error": {"code": e.rpc_code, "message": e.message, "data": e.data},
            }
        return {"id": envelope["id"], "result": result}


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(url=API_URL, api_key=API_KEY)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def api(config: ClientConfig, transport: FakeTransport) -> ApiClient:
    return ApiClient(config, transport=transport)
