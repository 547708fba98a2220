"""
Envelope Builder

Fluent, single-use construction of envelopes.

    envelope = (
        EnvelopeBuilder.command_message("reboot")
        .with_sender("scheduler")
        .copy_headers("Trace-Id")
        .with_header("Trace-Id", "t-42")
        .build()
    )

Defaults are applied lazily by build():
- id: a random UUID, unless with_id()/with_random_id() was called
- timestamp: the instant build() runs, unless at()/at_now()/at_supplied() was called

A builder is owned by one caller at a time; create a fresh one per envelope.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Mapping, TypeVar
from uuid import uuid4

from pydantic import ValidationError

from messenger.payload.plain import ToStringPayloadEncoder
from messenger.payload.ports import PayloadEncoder
from messenger.protocol.envelope import Envelope, InvalidEnvelopeError
from messenger.protocol.headers import (
    COPY_HEADERS_SEPARATOR,
    ContentType,
    DefinedHeader,
    MessageType,
    header_value,
)
from messenger.protocol.reply import copy_headers_keys_and_values

logger = logging.getLogger(__name__)

T = TypeVar("T")

HeaderKey = str | Enum
TimestampSupplier = Callable[[], datetime]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class EnvelopeBuilder(Generic[T]):
    """
    Accumulates the parts of an envelope and validates them all at once.

    Payloads are either raw strings (with_payload) or values encoded by a
    bound PayloadEncoder (with_encoder + with_payload).
    """

    def __init__(self):
        self._id: str | None = None
        self._sender: str | None = None
        self._timestamp_supplier: TimestampSupplier | None = None
        self._headers: dict[str, str] = {}
        self._payload: T | str | None = None
        self._encoder: PayloadEncoder[T] | None = None
        self._envelope_type: type[Envelope] = Envelope

    # === Identity ===

    def with_id(self, id: str) -> EnvelopeBuilder[T]:
        self._id = id
        return self

    def with_random_id(self) -> EnvelopeBuilder[T]:
        return self.with_id(str(uuid4()))

    def with_sender(self, sender: str) -> EnvelopeBuilder[T]:
        self._sender = sender
        return self

    # === Timestamp ===

    def at(self, timestamp: datetime) -> EnvelopeBuilder[T]:
        """Pin the timestamp to a fixed instant."""
        return self.at_supplied(lambda: timestamp)

    def at_now(self) -> EnvelopeBuilder[T]:
        """Pin the timestamp to the current instant (not the build instant)."""
        return self.at(_now())

    def at_build_time(self) -> EnvelopeBuilder[T]:
        """Stamp the envelope with the instant build() runs."""
        return self.at_supplied(_now)

    def at_supplied(self, supplier: TimestampSupplier) -> EnvelopeBuilder[T]:
        """Use ``supplier`` to produce the timestamp when build() runs."""
        self._timestamp_supplier = supplier
        return self

    # === Headers ===

    def with_header(self, key: HeaderKey, value: HeaderKey) -> EnvelopeBuilder[T]:
        """Set a header, replacing any previous value for the same key."""
        self._headers[header_value(key)] = header_value(value)
        return self

    def with_headers(self, headers: Mapping[Any, Any]) -> EnvelopeBuilder[T]:
        """Add all the given headers, replacing existing ones on key collision."""
        for key, value in headers.items():
            self.with_header(key, value)
        return self

    def replace_headers(self, headers: Mapping[Any, Any]) -> EnvelopeBuilder[T]:
        """Drop every header set so far and use the given ones instead."""
        self._headers.clear()
        return self.with_headers(headers)

    def without_header(self, key: HeaderKey) -> EnvelopeBuilder[T]:
        self._headers.pop(header_value(key), None)
        return self

    def clear_headers(self) -> EnvelopeBuilder[T]:
        self._headers.clear()
        return self

    def message_type(self, message_type: str | MessageType) -> EnvelopeBuilder[T]:
        return self.with_header(DefinedHeader.MESSAGE_TYPE, message_type)

    def content_type(self, content_type: str | ContentType) -> EnvelopeBuilder[T]:
        return self.with_header(DefinedHeader.CONTENT_TYPE, content_type)

    def plain_text(self) -> EnvelopeBuilder[T]:
        return self.content_type(ContentType.PLAIN)

    def json(self) -> EnvelopeBuilder[T]:
        return self.content_type(ContentType.JSON)

    def replies_to(self, replied_id: str) -> EnvelopeBuilder[T]:
        return self.with_header(DefinedHeader.REPLIES_TO, replied_id)

    def command(self, command: str | Enum) -> EnvelopeBuilder[T]:
        return self.with_header(DefinedHeader.COMMAND, command)

    def copy_headers(self, *names: HeaderKey) -> EnvelopeBuilder[T]:
        """Ask the recipient to echo the named headers back in its reply."""
        joined = COPY_HEADERS_SEPARATOR.join(header_value(name) for name in names)
        return self.with_header(DefinedHeader.COPY_HEADERS, joined)

    # === Payload ===

    def with_payload(self, payload: T | str | None) -> EnvelopeBuilder[T]:
        """
        Set the payload.

        Without an encoder the payload must be a string; with one, it is any
        value the encoder accepts and is encoded by build().
        """
        self._payload = payload
        return self

    def with_encoder(self, encoder: PayloadEncoder[T]) -> EnvelopeBuilder[T]:
        """Bind a payload encoder and set Content-Type to the encoder's tag."""
        self._encoder = encoder
        return self.content_type(encoder.content_type)

    def with_to_string_encoder(self) -> EnvelopeBuilder[T]:
        """Encode the payload with ``str()`` as Plain text."""
        return self.with_encoder(ToStringPayloadEncoder())

    # === Envelope type ===

    def with_envelope_type(self, envelope_type: type[Envelope]) -> EnvelopeBuilder[T]:
        """
        Build instances of an Envelope subclass instead of Envelope itself.

        The subclass receives the same fields and keeps the base validation.
        """
        if not (isinstance(envelope_type, type) and issubclass(envelope_type, Envelope)):
            raise TypeError(f"{envelope_type!r} is not an Envelope subclass")
        self._envelope_type = envelope_type
        return self

    # === Lifecycle ===

    def clear(self) -> EnvelopeBuilder[T]:
        """Reset the builder to its initial state."""
        self._id = None
        self._sender = None
        self._timestamp_supplier = None
        self._headers.clear()
        self._payload = None
        self._encoder = None
        self._envelope_type = Envelope
        return self

    def build(self) -> Envelope:
        """
        Create the envelope described by this builder.

        Later changes to the builder do not affect the returned envelope.

        Raises:
            InvalidEnvelopeError: If id or sender is blank, the timestamp is
                missing, a header key or value is blank, or a non-string
                payload was given without an encoder
            PayloadEncodingError: If the bound encoder rejects the payload
        """
        envelope_id = self._id if self._id is not None else str(uuid4())
        supplier = self._timestamp_supplier or _now
        timestamp = supplier()

        try:
            return self._envelope_type(
                id=envelope_id,
                sender=self._sender,
                timestamp=timestamp,
                headers=dict(self._headers),
                payload=self._encode_payload(),
            )
        except ValidationError as e:
            logger.debug(f"Envelope {envelope_id} rejected: {e}")
            raise InvalidEnvelopeError(
                f"Invalid envelope: {'; '.join(err['msg'] for err in e.errors())}",
                errors=e.errors(),
            ) from e

    def _encode_payload(self) -> str:
        if self._encoder is not None:
            return self._encoder.encode(self._payload)
        if self._payload is None:
            return ""
        if not isinstance(self._payload, str):
            raise InvalidEnvelopeError(
                f"Payload of type {type(self._payload).__name__} needs an encoder"
            )
        return self._payload

    # === Presets ===

    @classmethod
    def create(cls) -> EnvelopeBuilder[Any]:
        return cls()

    @classmethod
    def simple_message(cls) -> EnvelopeBuilder[Any]:
        return cls.create().message_type(MessageType.SIMPLE)

    @classmethod
    def reply_message(cls, original: Envelope | str) -> EnvelopeBuilder[Any]:
        """
        Start a reply.

        Given an envelope, the reply also inherits the headers the original
        sender listed in Copy-Headers. Headers set afterwards override them.

        Copied headers are merged before Message-Type and Replies-To are set,
        so a Copy-Headers list naming either of them has no effect: the reply
        is always typed Reply and always points at ``original.id``. Applying
        the copied headers last instead would let the original's own
        Message-Type and Replies-To leak into the reply.
        """
        if isinstance(original, Envelope):
            return (
                cls.create()
                .with_headers(copy_headers_keys_and_values(original))
                .message_type(MessageType.REPLY)
                .replies_to(original.id)
            )
        return cls.create().message_type(MessageType.REPLY).replies_to(original)

    @classmethod
    def command_message(cls, command: str | Enum) -> EnvelopeBuilder[Any]:
        return cls.create().message_type(MessageType.COMMAND).command(command)


class EnvelopeBuilderFactory(Generic[T]):
    """
    Hands out builders pre-bound to one sender and one payload encoder.

    Useful for services that always send as the same identity with the same
    content type.
    """

    def __init__(self, sender: str, encoder: PayloadEncoder[T] | None = None):
        self._sender = sender
        self._encoder = encoder

    @property
    def sender(self) -> str:
        return self._sender

    @property
    def encoder(self) -> PayloadEncoder[T] | None:
        return self._encoder

    def _bind(self, builder: EnvelopeBuilder[T]) -> EnvelopeBuilder[T]:
        builder.with_sender(self._sender)
        if self._encoder is not None:
            builder.with_encoder(self._encoder)
        return builder

    def create(self) -> EnvelopeBuilder[T]:
        return self._bind(EnvelopeBuilder.create())

    def simple_message(self) -> EnvelopeBuilder[T]:
        return self._bind(EnvelopeBuilder.simple_message())

    def reply_message(self, original: Envelope | str) -> EnvelopeBuilder[T]:
        return self._bind(EnvelopeBuilder.reply_message(original))

    def command_message(self, command: str | Enum) -> EnvelopeBuilder[T]:
        return self._bind(EnvelopeBuilder.command_message(command))
