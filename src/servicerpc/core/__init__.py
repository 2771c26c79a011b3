from servicerpc.core.config import ClientConfig, Configure, TransportConfig

__all__ = [
    "ClientConfig",
    "Configure",
    "TransportConfig",
]
