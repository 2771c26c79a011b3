"""
servicerpc: typed async clients for application services behind a single HTTP endpoint.
Every operation is a request dataclass, posted as a polymorphic JSON envelope.
"""
from servicerpc.core import ClientConfig, TransportConfig
from servicerpc.rpc import (
    ApplicationServiceClient,
    ArgumentError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    EnvelopeCodec,
    HttpxTransport,
    RemoteError,
    RpcError,
    StateError,
    TransportError,
)

__all__ = [
    "ApplicationServiceClient",
    "ArgumentError",
    "ClientConfig",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "EnvelopeCodec",
    "HttpxTransport",
    "RemoteError",
    "RpcError",
    "StateError",
    "TransportConfig",
    "TransportError",
]
