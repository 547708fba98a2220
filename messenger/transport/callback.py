"""
Callback Transport

Adapts any ``(envelope, recipient)`` function into a Transport, e.g. a thin
wrapper over an HTTP client or a message broker producer owned by the
application.
"""

from typing import Callable

from messenger.protocol.envelope import Envelope
from messenger.transport.ports import Transport, validate_send_arguments

SendFunction = Callable[[Envelope, str], None]


class CallbackTransport(Transport):
    def __init__(self, sender: SendFunction):
        self._sender = sender

    def send(self, envelope: Envelope, recipient: str) -> None:
        validate_send_arguments(envelope, recipient)
        self._sender(envelope, recipient)
