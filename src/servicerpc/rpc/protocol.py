"""RPC protocols: one endpoint, one POST per call; transport is the embedder's choice."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from servicerpc.core.config import Configure

ARGUMENT_ERROR_CODES = frozenset({"IllegalArgumentException", "ArgumentError"})
STATE_ERROR_CODES = frozenset({"IllegalStateException", "StateError"})
ARGUMENT_ERROR_STATUSES = frozenset({400, 404, 422})
STATE_ERROR_STATUSES = frozenset({409, 412})


class RpcError(Exception):
    """RPC call failed. Base of every error raised by the client."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")


class EncodeError(RpcError):
    """Request variant could not be serialized."""

    def __init__(self, message: str) -> None:
        super().__init__("ENCODE_ERROR", message)


class DecodeError(RpcError):
    """Body did not match the expected shape."""

    def __init__(self, message: str) -> None:
        super().__init__("DECODE_ERROR", message)


class TransportError(RpcError):
    """Connection, TLS or timeout failure before a response was obtained."""

    def __init__(self, message: str) -> None:
        super().__init__("TRANSPORT_ERROR", message)


class ConfigurationError(RpcError):
    """Embedder's configure callback failed; raised before any connection is attempted."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIG_ERROR", message)


class RemoteError(RpcError):
    """Remote side answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.status_code = status_code
        self.payload = dict(payload) if payload else {}
        super().__init__(code, message)

    @classmethod
    def from_response(cls, response: RpcResponse) -> RemoteError:
        """
        Build the classified error for a non-success response.
        Error envelope: {"error": {"code": "...", "message": "..."}} or {"error": "string"}.
        """
        payload: dict[str, Any] = {}
        text = response.content.decode("utf-8", errors="replace")
        try:
            data = json.loads(text) if text else None
        except ValueError:
            data = None
        if isinstance(data, dict):
            payload = data
        err = payload.get("error")
        if isinstance(err, dict):
            code = str(err.get("code", "UNKNOWN"))
            message = str(err.get("message", code))
        elif err is not None:
            code = str(err)
            message = str(payload.get("message", code))
        else:
            code = "UNKNOWN"
            message = text or f"HTTP {response.status_code}"

        if code in ARGUMENT_ERROR_CODES:
            kind: type[RemoteError] = ArgumentError
        elif code in STATE_ERROR_CODES:
            kind = StateError
        elif response.status_code in ARGUMENT_ERROR_STATUSES:
            kind = ArgumentError
        elif response.status_code in STATE_ERROR_STATUSES:
            kind = StateError
        else:
            kind = RemoteError
        return kind(response.status_code, code, message, payload)


class ArgumentError(RemoteError):
    """Caller supplied an invalid identifier or value (e.g. unknown study id)."""


class StateError(RemoteError):
    """Operation is invalid given the current remote state (e.g. study not live)."""


@dataclass(frozen=True)
class RpcResponse:
    """Raw response of one call: status and body bytes."""

    status_code: int
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class RpcSession(Protocol):
    """One open connection to the endpoint. Closed by the client after each call."""

    async def send(self, body: bytes, content_type: str) -> RpcResponse:
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class RpcTransport(Protocol):
    """RPC transport: open a session to host. User implements, or uses HttpxTransport."""

    def open(self, host: str, configure: Optional[Configure] = None) -> RpcSession:
        ...
