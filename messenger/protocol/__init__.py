# Envelope Protocol
# The immutable message envelope, its header vocabulary and construction helpers
#
# - Envelope: id, sender, timestamp, headers, raw payload
# - EnvelopeBuilder: fluent single-use construction with lazy defaults
# - Reply propagation: headers a reply inherits through Copy-Headers
# - Wire format: the five-field JSON object exchanged between peers

from messenger.protocol.headers import (
    DefinedHeader,
    MessageType,
    ContentType,
    COPY_HEADERS_SEPARATOR,
    header_value,
)
from messenger.protocol.envelope import (
    Envelope,
    EnvelopeValidationError,
    InvalidEnvelopeError,
)
from messenger.protocol.reply import copy_headers_keys_and_values, requested_copy_headers
from messenger.protocol.builder import EnvelopeBuilder, EnvelopeBuilderFactory
from messenger.protocol.wire import WireFormatError, to_wire, from_wire, dumps, loads

__all__ = [
    # Header vocabulary
    "DefinedHeader",
    "MessageType",
    "ContentType",
    "COPY_HEADERS_SEPARATOR",
    "header_value",
    # Envelope
    "Envelope",
    "EnvelopeValidationError",
    "InvalidEnvelopeError",
    # Reply propagation
    "copy_headers_keys_and_values",
    "requested_copy_headers",
    # Construction
    "EnvelopeBuilder",
    "EnvelopeBuilderFactory",
    # Wire format
    "WireFormatError",
    "to_wire",
    "from_wire",
    "dumps",
    "loads",
]
