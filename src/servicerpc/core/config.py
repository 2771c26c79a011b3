"""Client config: target host plus an override hook for the transport; fixed per client."""
from __future__ import annotations

import ssl
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import httpx

DEFAULT_SCHEME = "https"


@dataclass
class TransportConfig:
    """
    Transport settings, built fresh for every session.
    The embedder's configure callback mutates it before the connection opens:
    swap TLS settings, inject auth headers, downgrade to plain http, mount a test transport.
    """

    scheme: str = DEFAULT_SCHEME
    port: Optional[int] = None
    path: str = "/"
    headers: dict[str, str] = field(default_factory=dict)
    # None disables the deadline; timeouts are the embedder's call.
    timeout: Union[httpx.Timeout, float, None] = None
    verify: Union[bool, str, ssl.SSLContext] = True
    auth: Any = None
    transport: Optional[httpx.AsyncBaseTransport] = None

    @classmethod
    def build(cls, configure: Optional[Configure] = None) -> TransportConfig:
        """Defaults with the embedder override applied."""
        config = cls()
        if configure is not None:
            configure(config)
        return config

    def base_url(self, host: str) -> str:
        port = f":{self.port}" if self.port is not None else ""
        return f"{self.scheme}://{host}{port}"


Configure = Callable[[TransportConfig], None]


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable client config: host name without port (domain) and protocol,
    and an optional callback overriding the default transport configuration.
    """

    host: str
    configure: Optional[Configure] = None

    def __post_init__(self) -> None:
        host = self.host.strip() if self.host else ""
        if not host:
            raise ValueError("host must be a non-empty domain name")
        if "://" in host or ":" in host or "/" in host:
            raise ValueError(f"host must be a bare domain without scheme, port or path: {self.host!r}")
        object.__setattr__(self, "host", host)
