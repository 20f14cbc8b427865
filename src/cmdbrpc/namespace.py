"""Base class for API namespace wrappers."""

from __future__ import annotations

from typing import Any

from cmdbrpc.client import ApiClient
from cmdbrpc.error import ApplicationFault, RpcError


def bad_result(result: Any) -> ApplicationFault:
    """Build the error for a result a namespace did not accept."""
    if isinstance(result, dict) and "message" in result:
        return RpcError.application(f"Bad result: {result['message']}", data=result)
    return RpcError.application("Bad result", data=result)


def is_numeric(value: Any) -> bool:
    """True for ints, floats and numeric strings (ids often arrive as "42")."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        try:
            float(value)
        except ValueError:
            return False
        return True
    return False


def ensure_success(result: Any) -> dict[str, Any]:
    """Check the ``success: true`` marker some namespaces embed in results.

    Raises:
        ApplicationFault: If the marker is missing or not ``True``
    """
    if not isinstance(result, dict) or result.get("success") is not True:
        raise bad_result(result)
    return result


def ensure_id(result: Any, key: str = "id") -> int:
    """Return ``result[key]`` as int, or raise if it is missing or not numeric."""
    if not isinstance(result, dict) or not is_numeric(result.get(key)):
        raise bad_result(result)
    return to_int(result[key])


def to_int(value: Any) -> int:
    """Convert a numeric id as sent by the server ("42", 42, 42.0) to int."""
    if isinstance(value, int):
        return value
    return int(float(value))


class Namespace:
    """Requests for one API namespace.

    Subclasses shape parameters and interpret results; all network traffic
    goes through the ApiClient's ``request`` and ``batch_request``.
    """

    def __init__(self, api: ApiClient) -> None:
        self.api = api
