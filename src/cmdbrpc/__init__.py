"""CMDB JSON-RPC client

Convenience methods over a CMDB's JSON-RPC API, built on a batch request
engine that sends many calls in one HTTP round trip and hands the results
back in call order.
"""

from cmdbrpc.config import ClientConfig
from cmdbrpc.error import (
    ApplicationFault,
    ErrorCode,
    InvalidArgument,
    ProtocolFault,
    RpcError,
    TransportFault,
)
from cmdbrpc.ids import IdAllocator
from cmdbrpc.wire import (
    Call,
    Envelope,
    Failure,
    RpcResult,
    Success,
    decode_batch,
    decode_single,
    encode,
)
from cmdbrpc.transport import HttpTransport, Transport
from cmdbrpc.client import ApiClient
from cmdbrpc.namespace import Namespace
from cmdbrpc.objects import CMDBObjects
from cmdbrpc.category import CMDBCategory
from cmdbrpc.category_info import CMDBCategoryInfo
from cmdbrpc.dialog import CMDBDialog
from cmdbrpc.location_tree import CMDBLocationTree
from cmdbrpc.file import File
from cmdbrpc.checkmk import CheckMKStaticTag

__version__ = "0.1.0"

__all__ = [
    # Client
    "ApiClient",
    "ClientConfig",
    "IdAllocator",
    # Transport
    "Transport",
    "HttpTransport",
    # Errors
    "RpcError",
    "ErrorCode",
    "InvalidArgument",
    "TransportFault",
    "ProtocolFault",
    "ApplicationFault",
    # Envelope codec
    "Call",
    "Envelope",
    "Success",
    "Failure",
    "RpcResult",
    "encode",
    "decode_single",
    "decode_batch",
    # Namespaces
    "Namespace",
    "CMDBObjects",
    "CMDBCategory",
    "CMDBCategoryInfo",
    "CMDBDialog",
    "CMDBLocationTree",
    "File",
    "CheckMKStaticTag",
]
