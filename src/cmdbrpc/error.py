"""Error taxonomy for the CMDB JSON-RPC client.

Four kinds of failure are distinguished so callers can decide what to do:

- ``InvalidArgument``: the caller asked for something meaningless (empty
  batch, malformed call). Nothing was sent.
- ``TransportFault``: the HTTP exchange failed. The whole batch is treated
  as failed; no partial results exist.
- ``ProtocolFault``: the server answered, but not with valid JSON-RPC
  (missing/unknown/duplicate ids, wrong document shape).
- ``ApplicationFault``: the server executed a call and reported an error for
  it. Carried per result by the batch engine, raised by wrappers.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Fault classes."""

    INVALID_ARGUMENT = "invalid_argument"
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    APPLICATION = "application"


class RpcError(Exception):
    """Base class for every error raised by this package.

    Attributes:
        code: The fault class
        message: Human readable description
        data: Optional extra payload (server supplied for application errors)
    """

    code: ErrorCode = ErrorCode.APPLICATION

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"

    @staticmethod
    def invalid_argument(message: str) -> InvalidArgument:
        return InvalidArgument(message)

    @staticmethod
    def transport(message: str, status: int | None = None) -> TransportFault:
        return TransportFault(message, status=status)

    @staticmethod
    def protocol(message: str) -> ProtocolFault:
        return ProtocolFault(message)

    @staticmethod
    def application(
        message: str,
        rpc_code: int | None = None,
        data: Any = None,
    ) -> ApplicationFault:
        return ApplicationFault(message, rpc_code=rpc_code, data=data)

    @staticmethod
    def from_wire(error: dict[str, Any]) -> ApplicationFault:
        """Build an ApplicationFault from a JSON-RPC ``error`` object."""
        message = error.get("message")
        if not isinstance(message, str):
            message = "Unknown error" if message is None else str(message)
        rpc_code = error.get("code")
        if isinstance(rpc_code, bool) or not isinstance(rpc_code, int):
            rpc_code = None
        return ApplicationFault(message, rpc_code=rpc_code, data=error.get("data"))


class InvalidArgument(RpcError):
    """Raised before anything is sent, for requests that make no sense."""

    code = ErrorCode.INVALID_ARGUMENT


class TransportFault(RpcError):
    """Network or HTTP level failure. No result of the round trip is usable."""

    code = ErrorCode.TRANSPORT

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ProtocolFault(RpcError):
    """The response is not a valid answer to what was sent."""

    code = ErrorCode.PROTOCOL


class ApplicationFault(RpcError):
    """The remote system executed a call and reported that it failed."""

    code = ErrorCode.APPLICATION

    def __init__(
        self,
        message: str,
        rpc_code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message, data=data)
        self.rpc_code = rpc_code

    def __str__(self) -> str:
        if self.rpc_code is None:
            return self.message
        return f"{self.message} (code {self.rpc_code})"
