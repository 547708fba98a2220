"""
Message Handlers

A handler is any callable taking an envelope. Dispatchers and bound decoders
are handlers too, so routing tables compose by nesting.
"""

from typing import Callable

from messenger.protocol.envelope import Envelope

MessageHandler = Callable[[Envelope], None]


def do_nothing(envelope: Envelope) -> None:
    """Default handler: accepts the envelope and does nothing with it."""
    return None
