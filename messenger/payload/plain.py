"""
Plain Text Payload Codecs

Codecs for the Plain content type: the payload is the text itself.
"""

from enum import Enum
from typing import Any

from messenger.payload.ports import PayloadDecoder, PayloadEncoder, PayloadEncodingError
from messenger.protocol.headers import ContentType


class PlainContentTypeHandler:
    """Mixin declaring the Plain content type."""

    @property
    def content_type(self) -> str:
        return ContentType.PLAIN.value


class PlainPayloadEncoder(PlainContentTypeHandler, PayloadEncoder[str]):
    """Passes strings through untouched. None encodes as an empty payload."""

    def encode(self, value: str | None) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise PayloadEncodingError(type(value), "plain payloads must be strings")
        return value


class ToStringPayloadEncoder(PlainContentTypeHandler, PayloadEncoder[Any]):
    """
    Encodes any value with ``str()``.

    Enum members encode as their value, so header-style tags such as
    ``MessageType.REPLY`` travel as ``"Reply"``.
    """

    def encode(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, Enum):
            return str(value.value)
        return str(value)


class PlainPayloadDecoder(PlainContentTypeHandler, PayloadDecoder[str]):
    """Returns the payload text as is. Never fails."""

    def decode(self, raw: str) -> str:
        return raw
