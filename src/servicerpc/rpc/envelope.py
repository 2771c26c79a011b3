"""
Envelope codec: tags a request with its variant name so one endpoint serves every operation.

Wire shape: {"$type": "CreateStudy", "$version": "1.0", ...fields}.
Field payloads and results go through pydantic TypeAdapters over plain dataclasses.
"""
from __future__ import annotations

import json
import math
import types
import typing
from functools import lru_cache
from typing import Any, Union

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from servicerpc.ddd.requests import ServiceRequest
from servicerpc.rpc.protocol import DecodeError, EncodeError

TYPE_KEY = "$type"
VERSION_KEY = "$version"
DEFAULT_API_VERSION = "1.0"

_UNIT_BODIES = ("", "null", "{}")


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter[Any]:
    return TypeAdapter(tp)


def _has_non_finite(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, dict):
        return any(_has_non_finite(v) for v in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(_has_non_finite(v) for v in value)
    return False


def _variants(request_type: Any) -> tuple[type, ...]:
    if typing.get_origin(request_type) in (Union, types.UnionType):
        return typing.get_args(request_type)
    return (request_type,)


class EnvelopeCodec:
    """
    Codec for one subsystem's closed set of request variants.
    request_type: a Union of ServiceRequest dataclasses (or a single one).
    """

    def __init__(self, request_type: Any, *, api_version: str = DEFAULT_API_VERSION) -> None:
        self.request_type = request_type
        self.api_version = api_version
        self._by_name: dict[str, type] = {}
        self._names: dict[type, str] = {}
        for variant in _variants(request_type):
            if not (isinstance(variant, type) and issubclass(variant, ServiceRequest)):
                raise TypeError(f"{variant!r} is not a ServiceRequest")
            name = variant.__name__
            if name in self._by_name:
                raise ValueError(f"Duplicate request discriminator {name!r}")
            self._by_name[name] = variant
            self._names[variant] = name

    @property
    def discriminators(self) -> list[str]:
        return list(self._by_name)

    def discriminator(self, request_cls: type) -> str:
        """Stable variant name used as "$type"."""
        try:
            return self._names[request_cls]
        except KeyError:
            raise EncodeError(f"{request_cls.__name__} is not registered with this codec") from None

    def encode(self, request: ServiceRequest[Any]) -> bytes:
        """Serialize a request variant into an envelope (JSON bytes)."""
        name = self.discriminator(type(request))
        try:
            # JSON mode writes NaN and infinities as null; catch them first.
            if _has_non_finite(_adapter(type(request)).dump_python(request, warnings="error")):
                raise EncodeError(f"Cannot serialize {name}: NaN or infinite float")
            fields = _adapter(type(request)).dump_python(request, mode="json", warnings="error")
        except PydanticSerializationError as exc:
            raise EncodeError(f"Cannot serialize {name}: {exc}") from exc
        envelope = {TYPE_KEY: name, VERSION_KEY: self.api_version}
        envelope.update(fields)
        return json.dumps(envelope).encode()

    def decode_request(self, content: bytes | str) -> ServiceRequest[Any]:
        """Inverse of encode: reconstruct the request variant from an envelope."""
        data = self._load(content)
        if not isinstance(data, dict):
            raise DecodeError("Envelope must be a JSON object")
        fields = dict(data)
        name = fields.pop(TYPE_KEY, None)
        version = fields.pop(VERSION_KEY, None)
        if name is None:
            raise DecodeError(f"Envelope has no {TYPE_KEY!r} discriminator")
        variant = self._by_name.get(name)
        if variant is None:
            raise DecodeError(f"Unknown request discriminator {name!r}")
        if version != self.api_version:
            raise DecodeError(f"Unsupported envelope version {version!r}, expected {self.api_version!r}")
        try:
            return _adapter(variant).validate_python(fields)
        except ValidationError as exc:
            raise DecodeError(f"Invalid {name} envelope: {exc}") from exc

    def decode(self, content: bytes | str, result_type: Any) -> Any:
        """Decode a response body into result_type. None means a unit result."""
        if result_type is None or result_type is type(None):
            text = content.decode(errors="replace") if isinstance(content, bytes) else content
            if text.strip() not in _UNIT_BODIES:
                raise DecodeError("Expected an empty body for a unit result")
            return None
        try:
            return _adapter(result_type).validate_json(content)
        except ValidationError as exc:
            raise DecodeError(f"Response does not match {result_type!r}: {exc}") from exc

    @staticmethod
    def _load(content: bytes | str) -> Any:
        try:
            return json.loads(content)
        except ValueError as exc:
            raise DecodeError(f"Malformed JSON: {exc}") from exc
