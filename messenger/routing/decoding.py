"""
Content-negotiating Decoder

Decodes envelope payloads with one bound PayloadDecoder, checking the
envelope's Content-Type header first.

Decision flow:
1. Content-Type present but different from the decoder's tag
   -> fallback handler, the decoder is never called
2. Content-Type absent -> warning, decoding is attempted anyway
3. Decoding raises PayloadDecodingError -> fallback handler
4. Decoding succeeds -> continuation(value, envelope)

Both failure paths end at the same fallback; only the second one actually
calls the decoder. The continuation never runs after a failure.

    decoder = ContentNegotiatingDecoder(JsonPayloadDecoder(Reboot), fallback=reject)
    commands = CommandDispatcher({"reboot": decoder.bind(do_reboot)})
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from messenger.payload.ports import PayloadDecoder, PayloadDecodingError
from messenger.protocol.envelope import Envelope
from messenger.protocol.headers import DefinedHeader
from messenger.routing.events import DispatchEvent, DispatchEventType, DispatchObserver
from messenger.routing.handlers import MessageHandler, do_nothing

logger = logging.getLogger(__name__)

T = TypeVar("T")

Continuation = Callable[[T, Envelope], None]


class ContentNegotiatingDecoder(Generic[T]):
    """
    Wraps a payload decoder with content-type negotiation and a fallback.

    Args:
        decoder: The payload decoder; its content_type is the only tag accepted
        fallback: Runs with the original envelope when negotiation or
            decoding fails
        observer: Receives a DispatchEvent for every anomaly
        name: Name used in logs and events
    """

    def __init__(
        self,
        decoder: PayloadDecoder[T],
        fallback: MessageHandler = do_nothing,
        observer: DispatchObserver | None = None,
        name: str | None = None,
    ):
        self._decoder = decoder
        self._fallback = fallback
        self._observer = observer
        self._name = name or type(self).__name__

    @property
    def decoder(self) -> PayloadDecoder[T]:
        return self._decoder

    @property
    def content_type(self) -> str:
        return self._decoder.content_type

    @property
    def fallback(self) -> MessageHandler:
        return self._fallback

    def decode_and_continue(self, envelope: Envelope, continuation: Continuation[T]) -> None:
        """
        Decode the envelope's payload and pass the result on.

        Decoding failures never escape: they end at the fallback handler.
        Exceptions raised by the continuation or the fallback propagate.
        """
        content_type = envelope.content_type
        if content_type is None:
            self._report(
                DispatchEventType.MISSING_CONTENT_TYPE,
                envelope,
                detail=f"decoding as {self.content_type} anyway",
            )
        elif content_type != self.content_type:
            self._report(
                DispatchEventType.CONTENT_TYPE_MISMATCH,
                envelope,
                content_type,
                detail=f"decoder handles {self.content_type}",
            )
            self._fallback(envelope)
            return

        try:
            value = self._decoder.decode(envelope.payload)
        except PayloadDecodingError as e:
            self._report(DispatchEventType.DECODE_FAILED, envelope, content_type, detail=str(e))
            self._fallback(envelope)
            return

        continuation(value, envelope)

    def bind(self, continuation: Continuation[T]) -> MessageHandler:
        """Return a handler that decodes envelopes and feeds them to ``continuation``."""
        def handle(envelope: Envelope) -> None:
            self.decode_and_continue(envelope, continuation)

        handle.__name__ = getattr(continuation, "__name__", "handle")
        return handle

    def _report(
        self,
        event_type: DispatchEventType,
        envelope: Envelope,
        value: str | None = None,
        detail: str | None = None,
    ) -> None:
        logger.warning(
            f"{self._name}: {event_type.value} for envelope {envelope.id} "
            f"({DefinedHeader.CONTENT_TYPE.value}={value!r}): {detail}"
        )
        if self._observer is not None:
            self._observer(DispatchEvent(
                event_type=event_type,
                envelope_id=envelope.id,
                component=self._name,
                header=DefinedHeader.CONTENT_TYPE.value,
                value=value,
                detail=detail,
            ))
