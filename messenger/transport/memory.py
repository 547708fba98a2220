"""
In-Memory Transport

Loopback transport for development and testing: recipients are registered
with a handler (typically a TypeDispatcher) and every send is delivered
synchronously to it.

Features:
- Outbox per recipient, for inspection in tests
- Optional pass through the wire format, to exercise peer compatibility
- Strict mode: sending to an unregistered recipient raises
"""

import logging
import threading
from collections import defaultdict
from typing import Any

from messenger.protocol import wire
from messenger.protocol.envelope import Envelope
from messenger.routing.handlers import MessageHandler
from messenger.transport.ports import Transport, UnknownRecipientError, validate_send_arguments

logger = logging.getLogger(__name__)


class InMemoryTransport(Transport):
    """
    In-process transport.

    Delivery happens on the sender's thread, outside the internal lock, so
    handlers may send further envelopes (e.g. replies) through the same
    transport.
    """

    def __init__(self, through_wire: bool = False, strict: bool = False):
        """
        Initialize the transport.

        Args:
            through_wire: Encode and decode every envelope with the wire
                format before delivery
            strict: Raise UnknownRecipientError for unregistered recipients
                instead of only recording the envelope
        """
        self._through_wire = through_wire
        self._strict = strict

        self._lock = threading.Lock()
        self._endpoints: dict[str, MessageHandler] = {}
        self._outbox: dict[str, list[Envelope]] = defaultdict(list)

        # Statistics
        self._sent_count = 0
        self._delivered_count = 0
        self._undeliverable_count = 0

    def register(self, recipient: str, handler: MessageHandler) -> None:
        """Deliver envelopes sent to ``recipient`` to ``handler``."""
        with self._lock:
            self._endpoints[recipient] = handler
        logger.debug(f"Registered in-memory endpoint {recipient}")

    def unregister(self, recipient: str) -> bool:
        with self._lock:
            return self._endpoints.pop(recipient, None) is not None

    def send(self, envelope: Envelope, recipient: str) -> None:
        validate_send_arguments(envelope, recipient)

        if self._through_wire:
            envelope = wire.loads(wire.dumps(envelope))

        with self._lock:
            self._sent_count += 1
            self._outbox[recipient].append(envelope)
            handler = self._endpoints.get(recipient)
            if handler is None:
                self._undeliverable_count += 1
            else:
                self._delivered_count += 1

        if handler is None:
            if self._strict:
                raise UnknownRecipientError(recipient)
            logger.debug(f"No endpoint for {recipient}, envelope {envelope.id} kept in outbox")
            return

        handler(envelope)

    def sent(self, recipient: str | None = None) -> list[Envelope]:
        """Envelopes sent so far, to one recipient or to all of them."""
        with self._lock:
            if recipient is not None:
                return list(self._outbox.get(recipient, []))
            return [envelope for envelopes in self._outbox.values() for envelope in envelopes]

    def clear(self) -> None:
        """Forget all sent envelopes. Registered endpoints are kept."""
        with self._lock:
            self._outbox.clear()

    def stats(self) -> dict[str, Any]:
        """Get transport statistics."""
        with self._lock:
            return {
                "endpoints": len(self._endpoints),
                "sent": self._sent_count,
                "delivered": self._delivered_count,
                "undeliverable": self._undeliverable_count,
            }
