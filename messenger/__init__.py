# Messenger - transport-agnostic message envelopes
# Immutable envelopes, header-driven dispatch and content-negotiating decoding

__version__ = "0.1.0"

# Re-export commonly used components for convenience
from messenger.protocol import (
    DefinedHeader,
    MessageType,
    ContentType,
    Envelope,
    EnvelopeValidationError,
    InvalidEnvelopeError,
    EnvelopeBuilder,
    EnvelopeBuilderFactory,
    copy_headers_keys_and_values,
)

from messenger.payload import (
    PayloadEncoder,
    PayloadDecoder,
    PayloadEncodingError,
    PayloadDecodingError,
)

from messenger.routing import (
    MessageHandler,
    do_nothing,
    TypeDispatcher,
    CommandDispatcher,
    ContentNegotiatingDecoder,
    DispatchEvent,
    DispatchEventType,
)

from messenger.transport import Transport, CallbackTransport, InMemoryTransport

from messenger.factory import create_builder_factory

__all__ = [
    "__version__",
    # Protocol
    "DefinedHeader",
    "MessageType",
    "ContentType",
    "Envelope",
    "EnvelopeValidationError",
    "InvalidEnvelopeError",
    "EnvelopeBuilder",
    "EnvelopeBuilderFactory",
    "copy_headers_keys_and_values",
    # Payload codecs
    "PayloadEncoder",
    "PayloadDecoder",
    "PayloadEncodingError",
    "PayloadDecodingError",
    # Routing
    "MessageHandler",
    "do_nothing",
    "TypeDispatcher",
    "CommandDispatcher",
    "ContentNegotiatingDecoder",
    "DispatchEvent",
    "DispatchEventType",
    # Transport
    "Transport",
    "CallbackTransport",
    "InMemoryTransport",
    # Factory
    "create_builder_factory",
]
