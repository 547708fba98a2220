"""
Messenger Factory

Factory functions creating payload codecs and envelope builder factories
from configuration or environment variables.

Supported content types:
- plain: text passthrough (Content-Type: Plain)
- json: JSON bound to a Python type through pydantic (Content-Type: JSON)

Environment Variables:
- MESSENGER_SENDER: Sender identity stamped on built envelopes
- MESSENGER_CONTENT_TYPE: Payload codec (plain, json)
"""

from __future__ import annotations

import logging
import os
from typing import Any

from messenger.payload.json_codec import JsonPayloadDecoder, JsonPayloadEncoder
from messenger.payload.plain import PlainPayloadDecoder, PlainPayloadEncoder
from messenger.payload.ports import PayloadDecoder, PayloadEncoder
from messenger.protocol.builder import EnvelopeBuilderFactory

logger = logging.getLogger(__name__)

# Valid content type names
VALID_CONTENT_TYPES = {"plain", "json"}


def _resolve_content_type(content_type: str | None) -> str:
    if content_type is None:
        content_type = os.getenv("MESSENGER_CONTENT_TYPE", "plain")

    content_type = content_type.lower()

    if content_type not in VALID_CONTENT_TYPES:
        raise ValueError(
            f"Unknown content type: {content_type}. "
            f"Valid options: {', '.join(sorted(VALID_CONTENT_TYPES))}"
        )
    return content_type


def create_payload_encoder(
    content_type: str | None = None,
    value_type: Any = Any,
) -> PayloadEncoder[Any]:
    """
    Create a payload encoder.

    Args:
        content_type: "plain" or "json". Auto-detects from
            MESSENGER_CONTENT_TYPE if not specified (default: plain)
        value_type: Type bound to the JSON encoder (ignored for plain)

    Raises:
        ValueError: If the content type is unknown
    """
    content_type = _resolve_content_type(content_type)
    if content_type == "json":
        return JsonPayloadEncoder(value_type)
    return PlainPayloadEncoder()


def create_payload_decoder(
    content_type: str | None = None,
    value_type: Any = Any,
) -> PayloadDecoder[Any]:
    """
    Create a payload decoder.

    Args:
        content_type: "plain" or "json". Auto-detects from
            MESSENGER_CONTENT_TYPE if not specified (default: plain)
        value_type: Type the JSON decoder validates into (ignored for plain)

    Raises:
        ValueError: If the content type is unknown
    """
    content_type = _resolve_content_type(content_type)
    if content_type == "json":
        return JsonPayloadDecoder(value_type)
    return PlainPayloadDecoder()


def create_builder_factory(
    sender: str | None = None,
    content_type: str | None = None,
    value_type: Any = Any,
) -> EnvelopeBuilderFactory[Any]:
    """
    Create an envelope builder factory.

    Args:
        sender: Sender identity. Auto-detects from MESSENGER_SENDER.
        content_type: Payload codec name. Auto-detects from
            MESSENGER_CONTENT_TYPE.
        value_type: Type bound to the JSON encoder

    Returns:
        Builder factory stamping every envelope with the sender and encoder

    Raises:
        ValueError: If no sender is configured or the content type is unknown

    Examples:
        # Auto-detect from environment
        factory = create_builder_factory()

        # Explicit configuration
        factory = create_builder_factory(sender="billing", content_type="json")
        envelope = factory.simple_message().with_payload({"total": 12}).build()
    """
    if sender is None:
        sender = os.getenv("MESSENGER_SENDER")

    if not sender or not sender.strip():
        raise ValueError("No sender configured: pass sender= or set MESSENGER_SENDER")

    encoder = create_payload_encoder(content_type, value_type)
    logger.info(f"Creating envelope builder factory (sender={sender}, content_type={encoder.content_type})")
    return EnvelopeBuilderFactory(sender, encoder)
