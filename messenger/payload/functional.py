"""
Function-backed Payload Codecs

Wrap plain functions as codecs for custom content types:

    csv_decoder = FunctionPayloadDecoder("CSV", parse_rows)

Functions signal bad input by raising ValueError (or a subclass such as
json.JSONDecodeError); the wrappers translate it into the payload error
types expected by the dispatch layer.
"""

from typing import Any, Callable, TypeVar

from messenger.payload.ports import (
    PayloadDecoder,
    PayloadDecodingError,
    PayloadEncoder,
    PayloadEncodingError,
)
from messenger.protocol.headers import header_value

T = TypeVar("T")


class FunctionPayloadEncoder(PayloadEncoder[T]):
    def __init__(self, content_type: Any, encode: Callable[[T], str]):
        self._content_type = header_value(content_type)
        self._encode = encode

    @property
    def content_type(self) -> str:
        return self._content_type

    def encode(self, value: T) -> str:
        try:
            return self._encode(value)
        except (TypeError, ValueError) as e:
            raise PayloadEncodingError(type(value), str(e)) from e


class FunctionPayloadDecoder(PayloadDecoder[T]):
    def __init__(self, content_type: Any, decode: Callable[[str], T]):
        self._content_type = header_value(content_type)
        self._decode = decode

    @property
    def content_type(self) -> str:
        return self._content_type

    def decode(self, raw: str) -> T:
        try:
            return self._decode(raw)
        except ValueError as e:
            raise PayloadDecodingError(raw, message=str(e)) from e
