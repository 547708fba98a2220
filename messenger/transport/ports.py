"""
Transport Port Interface

The contract the messenger expects from whatever moves envelopes between
peers. Transports live outside the protocol and routing packages: those never
perform I/O themselves.

A receiving transport is expected to hand every envelope it gets to a
dispatcher (any MessageHandler).
"""

from abc import ABC, abstractmethod

from messenger.protocol.envelope import Envelope


class Transport(ABC):
    """Sends envelopes to named recipients."""

    @abstractmethod
    def send(self, envelope: Envelope, recipient: str) -> None:
        """
        Send an envelope.

        Args:
            envelope: The envelope to send
            recipient: Identification of the destination

        Raises:
            ValueError: If envelope or recipient is None
            TransportError: If the envelope could not be delivered
        """
        ...


def validate_send_arguments(envelope: Envelope | None, recipient: str | None) -> None:
    if envelope is None:
        raise ValueError("The envelope must not be None")
    if recipient is None:
        raise ValueError("The recipient must not be None")


# =============================================================================
# Exceptions
# =============================================================================

class TransportError(Exception):
    """Base exception for transport errors."""
    pass


class UnknownRecipientError(TransportError):
    """No route to the requested recipient."""
    def __init__(self, recipient: str):
        self.recipient = recipient
        super().__init__(f"Unknown recipient: {recipient}")
