"""Transport out of the box: HTTPS + JSON over httpx, one AsyncClient per session."""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from servicerpc.core.config import Configure, TransportConfig
from servicerpc.rpc.protocol import ConfigurationError, RpcResponse, TransportError

LOG = logging.getLogger("servicerpc.rpc.transport")


class HttpxSession:
    """One httpx.AsyncClient bound to the endpoint; posts bodies to config.path."""

    def __init__(self, client: httpx.AsyncClient, path: str) -> None:
        self._client = client
        self._path = path

    async def send(self, body: bytes, content_type: str) -> RpcResponse:
        try:
            r = await self._client.post(self._path, content=body, headers={"Content-Type": content_type})
        except (httpx.TransportError, httpx.InvalidURL) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e
        return RpcResponse(status_code=r.status_code, content=r.content, headers=dict(r.headers))

    async def close(self) -> None:
        await self._client.aclose()


class HttpxTransport:
    """
    Default RpcTransport. Encrypted (https) unless configure sets another scheme.
    No pooling across calls: every open() builds a fresh client.
    """

    def open(self, host: str, configure: Optional[Configure] = None) -> HttpxSession:
        try:
            config = TransportConfig.build(configure)
        except Exception as e:
            raise ConfigurationError(f"configure callback failed for {host}: {e}") from e
        base_url = config.base_url(host)
        if config.scheme != "https":
            LOG.debug("Transport to %s is not encrypted", base_url)
        client = httpx.AsyncClient(
            base_url=base_url,
            headers=config.headers,
            timeout=config.timeout,
            verify=config.verify,
            auth=config.auth,
            transport=config.transport,
        )
        return HttpxSession(client, config.path)
