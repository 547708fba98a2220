# Payload Codecs
# Encoders and decoders for envelope payloads, keyed by Content-Type tag
#
# Built-in codecs:
# - Plain: text passthrough / str() conversion
# - JSON: pydantic TypeAdapter bound to a Python type
# - Function-backed codecs for custom content types

from messenger.payload.ports import (
    ContentTypeHandler,
    PayloadEncoder,
    PayloadDecoder,
    PayloadError,
    PayloadEncodingError,
    PayloadDecodingError,
)
from messenger.payload.plain import (
    PlainPayloadEncoder,
    ToStringPayloadEncoder,
    PlainPayloadDecoder,
)
from messenger.payload.json_codec import JsonPayloadEncoder, JsonPayloadDecoder
from messenger.payload.functional import FunctionPayloadEncoder, FunctionPayloadDecoder

__all__ = [
    # Port interfaces
    "ContentTypeHandler",
    "PayloadEncoder",
    "PayloadDecoder",
    "PayloadError",
    "PayloadEncodingError",
    "PayloadDecodingError",
    # Plain
    "PlainPayloadEncoder",
    "ToStringPayloadEncoder",
    "PlainPayloadDecoder",
    # JSON
    "JsonPayloadEncoder",
    "JsonPayloadDecoder",
    # Custom content types
    "FunctionPayloadEncoder",
    "FunctionPayloadDecoder",
]
