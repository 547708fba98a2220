# Envelope Routing
# Header-driven dispatch of received envelopes to handler logic
#
# - TypeDispatcher: routes on Message-Type, with non-typed and default branches
# - CommandDispatcher: routes Command envelopes on the Command header
# - ContentNegotiatingDecoder: checks Content-Type, decodes, falls back on failure
# - DispatchEvent: structured record of every routing anomaly

from messenger.routing.handlers import MessageHandler, do_nothing
from messenger.routing.events import DispatchEvent, DispatchEventType, DispatchObserver
from messenger.routing.dispatcher import TypeDispatcher, CommandDispatcher
from messenger.routing.decoding import ContentNegotiatingDecoder

__all__ = [
    # Handlers
    "MessageHandler",
    "do_nothing",
    # Observability
    "DispatchEvent",
    "DispatchEventType",
    "DispatchObserver",
    # Dispatch
    "TypeDispatcher",
    "CommandDispatcher",
    # Content negotiation
    "ContentNegotiatingDecoder",
]
