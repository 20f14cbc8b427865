"""JSON-RPC envelope codec.

Translates between logical calls and the wire format spoken by the CMDB:

    request:  {"version": "2.0", "method": "...", "params": {...}, "id": 1}
    response: {"id": 1, "result": ...}
              {"id": 1, "error": {"code": -32000, "message": "...", "data": ...}}

A batch is a JSON array of request objects, answered by a JSON array of
response objects in no guaranteed order.

This module handles shape checks only. Matching responses to requests by
id is the job of the batch engine in client.py.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from cmdbrpc.error import ApplicationFault, RpcError

PROTOCOL_VERSION: Final[str] = "2.0"


def is_int_not_bool(x: object) -> bool:
    """Check if x is an int but not a bool.

    bool is a subclass of int, so ``true`` in a response would otherwise
    be accepted as id 1.
    """
    return isinstance(x, int) and not isinstance(x, bool)


@dataclass(frozen=True, slots=True)
class Call:
    """One logical API call: a method name and its parameters."""

    method: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @staticmethod
    def coerce(value: Any) -> Call:
        """Accept a Call or a ``{"method": ..., "params": ...}`` mapping."""
        if isinstance(value, Call):
            call = value
        elif isinstance(value, Mapping):
            if "method" not in value:
                raise RpcError.invalid_argument("Call is missing 'method'")
            params = value.get("params")
            call = Call(value["method"], {} if params is None else params)
        else:
            raise RpcError.invalid_argument(
                f"Call must be a Call or a mapping, got {type(value).__name__}"
            )

        if not isinstance(call.method, str) or not call.method:
            raise RpcError.invalid_argument(
                f"Call method must be a non-empty string, got {call.method!r}"
            )
        if not isinstance(call.params, Mapping):
            raise RpcError.invalid_argument(
                f"Call params must be a mapping, got {type(call.params).__name__}"
            )
        return call


@dataclass(frozen=True, slots=True)
class Envelope:
    """Wire request unit."""

    id: int
    method: str
    params: Mapping[str, Any]

    def to_json(self) -> dict[str, Any]:
        """Convert to a JSON object."""
        return {
            "version": PROTOCOL_VERSION,
            "method": self.method,
            "params": dict(self.params),
            "id": self.id,
        }


def encode(method: str, params: Mapping[str, Any], id: int) -> Envelope:
    """Wrap a call into an envelope carrying ``id``."""
    return Envelope(id=id, method=method, params=params)


# Results


@dataclass(frozen=True, slots=True)
class Success:
    """A call the server executed successfully.

    ``value`` is the untouched ``result`` member, including any ``success``
    or ``message`` keys a namespace embeds in it.
    """

    id: int
    value: Any

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Failure:
    """A call the server executed and reported as failed."""

    id: int
    error: ApplicationFault

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


RpcResult = Success | Failure


def decode_single(obj: Any) -> RpcResult:
    """Parse one JSON-RPC response object.

    Raises:
        ProtocolFault: If the object is not a valid response
    """
    if not isinstance(obj, dict):
        raise RpcError.protocol(
            f"Response must be a JSON object, got {type(obj).__name__}"
        )

    if "id" not in obj:
        raise RpcError.protocol("Response has no id")
    response_id = obj["id"]
    if not is_int_not_bool(response_id):
        raise RpcError.protocol(f"Response id must be an integer, got {response_id!r}")

    if "error" in obj and obj["error"] is not None:
        error = obj["error"]
        if not isinstance(error, dict):
            raise RpcError.protocol(
                f"Response {response_id} has a malformed error member: {error!r}"
            )
        return Failure(response_id, RpcError.from_wire(error))

    if "result" not in obj:
        raise RpcError.protocol(f"Response {response_id} has neither result nor error")

    return Success(response_id, obj["result"])


def decode_batch(doc: Any) -> list[RpcResult]:
    """Parse a JSON-RPC batch response.

    Per-call application errors come back as Failure elements; only
    structural problems raise.

    Raises:
        ProtocolFault: If ``doc`` is not an array or an element is malformed
    """
    if not isinstance(doc, list):
        raise RpcError.protocol(
            f"Batch response must be a JSON array, got {type(doc).__name__}"
        )
    return [decode_single(item) for item in doc]


def serialize(payload: Any) -> bytes:
    """Serialize an envelope (or list of envelopes) to a request body."""
    if isinstance(payload, Envelope):
        payload = payload.to_json()
    elif isinstance(payload, list):
        payload = [e.to_json() if isinstance(e, Envelope) else e for e in payload]
    try:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RpcError.invalid_argument(f"Parameters are not JSON serializable: {e}") from e


def parse_body(body: bytes | str) -> Any:
    """Decode a response body.

    Raises:
        TransportFault: If the body is empty or not JSON
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RpcError.transport(f"Response body is not UTF-8: {e}") from e
    if not body.strip():
        raise RpcError.transport("Response body is empty")
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise RpcError.transport(f"Response body is not valid JSON: {e}") from e
