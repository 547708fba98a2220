#!/usr/bin/env python3
"""
Command Service Example

Demonstrates a client and a service exchanging envelopes over the in-memory
transport.

Workflow:
1. The client sends a "reboot" command with a JSON payload, asking for its
   Trace header to be echoed back
2. The service dispatches on Message-Type, then on Command
3. The content-negotiating decoder turns the payload into a RebootRequest
4. The service replies; the reply carries the copied Trace header
5. Malformed requests and unknown commands end at fallback handlers

Usage:
    python scripts/example_command_service.py

The client side is configured from the environment (or a .env file):
    MESSENGER_SENDER=client MESSENGER_CONTENT_TYPE=json
"""

import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()
os.environ.setdefault("MESSENGER_SENDER", "client")
os.environ.setdefault("MESSENGER_CONTENT_TYPE", "json")

from messenger import (
    CommandDispatcher,
    ContentNegotiatingDecoder,
    DispatchEvent,
    Envelope,
    EnvelopeBuilderFactory,
    InMemoryTransport,
    TypeDispatcher,
    create_builder_factory,
)
from messenger.payload import JsonPayloadDecoder, PlainPayloadEncoder

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class RebootRequest(BaseModel):
    host: str
    force: bool = False


# =============================================================================
# Service side
# =============================================================================

def build_service(transport: InMemoryTransport) -> TypeDispatcher:
    replies = EnvelopeBuilderFactory("ops-service", PlainPayloadEncoder())

    def on_event(event: DispatchEvent) -> None:
        logger.info(f"[service] anomaly {event.event_type.value} on {event.envelope_id}")

    def reject(envelope: Envelope) -> None:
        reply = replies.reply_message(envelope).with_payload("rejected").build()
        transport.send(reply, envelope.sender)

    def do_reboot(request: RebootRequest, envelope: Envelope) -> None:
        logger.info(f"[service] rebooting {request.host} (force={request.force})")
        reply = replies.reply_message(envelope).with_payload(f"rebooted {request.host}").build()
        transport.send(reply, envelope.sender)

    decoder = ContentNegotiatingDecoder(
        JsonPayloadDecoder(RebootRequest),
        fallback=reject,
        observer=on_event,
    )
    commands = CommandDispatcher(
        {"reboot": decoder.bind(do_reboot)},
        default_handler=reject,
        observer=on_event,
        name="ops-commands",
    )
    return TypeDispatcher(command=commands, observer=on_event, name="ops-inbox")


# =============================================================================
# Client side
# =============================================================================

def build_client() -> TypeDispatcher:
    def on_reply(envelope: Envelope) -> None:
        logger.info(
            f"[client] reply to {envelope.replies_to}: {envelope.payload!r} "
            f"(Trace={envelope.header('Trace')})"
        )

    return TypeDispatcher(reply=on_reply, name="client-inbox")


# =============================================================================
# Main
# =============================================================================

def main():
    """Run the example."""
    logger.info("Command Service Example")
    logger.info("=" * 60)

    requests = create_builder_factory()

    transport = InMemoryTransport(through_wire=True)
    transport.register("ops", build_service(transport))
    transport.register(requests.sender, build_client())

    # Well-formed command
    transport.send(
        requests.command_message("reboot")
        .copy_headers("Trace")
        .with_header("Trace", "trace-1")
        .with_payload({"host": "db-1", "force": True})
        .build(),
        "ops",
    )

    # Payload missing the host field
    transport.send(
        requests.command_message("reboot")
        .copy_headers("Trace")
        .with_header("Trace", "trace-2")
        .with_payload({"hostname": "db-2"})
        .build(),
        "ops",
    )

    # Unknown command
    transport.send(requests.command_message("shutdown").with_payload({}).build(), "ops")

    logger.info("")
    logger.info(f"Transport stats: {transport.stats()}")


if __name__ == "__main__":
    main()
