"""
ApplicationServiceClient: base for clients of one application service endpoint.
Requests are posted to a single endpoint as polymorphic JSON envelopes.
"""
from __future__ import annotations

import logging
from typing import Generic, Optional, TypeVar

import anyio

from servicerpc.core.config import ClientConfig, Configure
from servicerpc.ddd.requests import ServiceRequest
from servicerpc.rpc.envelope import EnvelopeCodec
from servicerpc.rpc.protocol import (
    RemoteError,
    RpcError,
    RpcResponse,
    RpcSession,
    RpcTransport,
    TransportError,
)
from servicerpc.rpc.transport import HttpxTransport

LOG = logging.getLogger("servicerpc.rpc.client")

CONTENT_TYPE = "application/json"

R = TypeVar("R")
TRequest = TypeVar("TRequest")


class ApplicationServiceClient(Generic[TRequest]):
    """
    Facade base: invoke(request) -> decoded result of request.result_type.
    Each call opens its own transport session and closes it on every exit path.
    Errors: EncodeError, TransportError, RemoteError (ArgumentError / StateError), DecodeError.
    Nothing is retried.
    """

    def __init__(
        self,
        host: str,
        codec: EnvelopeCodec,
        configure: Optional[Configure] = None,
        *,
        transport: Optional[RpcTransport] = None,
    ) -> None:
        self.config = ClientConfig(host, configure)
        self._codec = codec
        self._transport: RpcTransport = transport if transport is not None else HttpxTransport()

    @property
    def host(self) -> str:
        return self.config.host

    @property
    def codec(self) -> EnvelopeCodec:
        return self._codec

    async def invoke(self, request: ServiceRequest[R]) -> R:
        """
        Post request to the endpoint and decode the response as the request's result type.
        Type checkers bind only the result type; a request outside this client's union
        is rejected at runtime with EncodeError before any session opens.
        """
        body = self._codec.encode(request)
        name = self._codec.discriminator(type(request))
        LOG.debug("Posting %s to %s", name, self.config.host)

        try:
            session = self._transport.open(self.config.host, self.config.configure)
        except RpcError:
            raise
        except Exception as e:
            raise TransportError(f"Cannot open session to {self.config.host}: {e}") from e

        try:
            try:
                response = await session.send(body, CONTENT_TYPE)
            except RpcError:
                raise
            except Exception as e:
                raise TransportError(f"{name} to {self.config.host} failed: {e}") from e
            result = self._result(name, request, response)
        except BaseException:
            await self._release(session, name, failed=True)
            raise
        await self._release(session, name, failed=False)
        return result

    def _result(self, name: str, request: ServiceRequest[R], response: RpcResponse) -> R:
        LOG.debug("%s answered %s", name, response.status_code)
        if not response.is_success:
            error = RemoteError.from_response(response)
            LOG.warning("%s rejected by %s: %s", name, self.config.host, error)
            raise error
        return self._codec.decode(response.content, request.result_type)

    async def _release(self, session: RpcSession, name: str, *, failed: bool) -> None:
        # Release even when the awaiting task was cancelled.
        with anyio.CancelScope(shield=True):
            try:
                await session.close()
            except Exception as e:
                if not failed:
                    raise TransportError(f"Closing session for {name} failed: {e}") from e
                # The call's own error wins.
                LOG.warning("Closing session for %s failed: %s", name, e)
