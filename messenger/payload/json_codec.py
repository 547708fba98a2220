"""
JSON Payload Codecs

Codecs for the JSON content type, bound to a Python type through a pydantic
TypeAdapter. The bound type can be a pydantic model, a dataclass, a TypedDict
or any annotation pydantic understands (``dict[str, Any]``, ``list[int]``...).

    decoder = JsonPayloadDecoder(RebootRequest)
    request = decoder.decode('{"host": "db-1", "force": true}')

A payload that is not valid JSON, or that does not validate against the
bound type, raises PayloadDecodingError.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from messenger.payload.ports import (
    PayloadDecoder,
    PayloadDecodingError,
    PayloadEncoder,
    PayloadEncodingError,
)
from messenger.protocol.headers import ContentType

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonContentTypeHandler:
    """Mixin declaring the JSON content type."""

    @property
    def content_type(self) -> str:
        return ContentType.JSON.value


class JsonPayloadEncoder(JsonContentTypeHandler, PayloadEncoder[T]):
    """Encodes values of the bound type as compact JSON."""

    def __init__(self, value_type: Any = Any):
        self._value_type = value_type
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)

    @property
    def value_type(self) -> Any:
        return self._value_type

    def encode(self, value: T) -> str:
        try:
            return self._adapter.dump_json(value).decode("utf-8")
        except PydanticSerializationError as e:
            raise PayloadEncodingError(type(value), str(e)) from e


class JsonPayloadDecoder(JsonContentTypeHandler, PayloadDecoder[T]):
    """Decodes JSON payloads into instances of the bound type."""

    def __init__(self, value_type: Any = Any):
        self._value_type = value_type
        self._adapter: TypeAdapter[T] = TypeAdapter(value_type)

    @property
    def value_type(self) -> Any:
        return self._value_type

    def decode(self, raw: str) -> T:
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            logger.debug(f"JSON payload rejected for {self._value_type!r}: {e}")
            raise PayloadDecodingError(raw, self._value_type, str(e)) from e
