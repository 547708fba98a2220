# Transport Layer
# Moves envelopes between peers
# Separated from protocol and routing logic, which never perform I/O

from messenger.transport.ports import Transport, TransportError, UnknownRecipientError
from messenger.transport.callback import CallbackTransport
from messenger.transport.memory import InMemoryTransport

__all__ = [
    "Transport",
    "TransportError",
    "UnknownRecipientError",
    "CallbackTransport",
    "InMemoryTransport",
]
