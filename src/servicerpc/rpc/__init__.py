from servicerpc.rpc.protocol import (
    ArgumentError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    RemoteError,
    RpcError,
    RpcResponse,
    RpcSession,
    RpcTransport,
    StateError,
    TransportError,
)
from servicerpc.rpc.envelope import EnvelopeCodec
from servicerpc.rpc.transport import HttpxSession, HttpxTransport
from servicerpc.rpc.client import ApplicationServiceClient

__all__ = [
    "ApplicationServiceClient",
    "ArgumentError",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "EnvelopeCodec",
    "HttpxSession",
    "HttpxTransport",
    "RemoteError",
    "RpcError",
    "RpcResponse",
    "RpcSession",
    "RpcTransport",
    "StateError",
    "TransportError",
]
