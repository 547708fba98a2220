"""
Header-driven Dispatch

Routes envelopes to handlers by the value of a header.

Two levels are provided:
1. TypeDispatcher keys on Message-Type.
   - no Message-Type header -> non-typed handler
   - known type -> its handler
   - unknown type -> default handler
2. CommandDispatcher keys on Command and is meant to be registered as the
   handler for the Command type.
   - known command -> its handler
   - unknown command -> default handler
   - no Command header -> anomaly is reported, then the default handler runs

The two levels are independent: a command dispatcher never hands an envelope
back to the type level.

    dispatcher = TypeDispatcher(
        simple=on_simple,
        reply=on_reply,
        command=CommandDispatcher({"reboot": on_reboot}, default_handler=on_unknown_command),
        non_typed_handler=on_legacy,
    )
    dispatcher(envelope)

Lookups are exact string matches. Tables are frozen at construction, so a
dispatcher can be shared by any number of threads. Exceptions raised by
handlers propagate to the caller of dispatch().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from messenger.protocol.envelope import Envelope
from messenger.protocol.headers import DefinedHeader, MessageType, header_value
from messenger.routing.events import DispatchEvent, DispatchEventType, DispatchObserver
from messenger.routing.handlers import MessageHandler, do_nothing

logger = logging.getLogger(__name__)

HandlerTable = Mapping[str | Enum, MessageHandler]


def _freeze(handlers: HandlerTable | None) -> Mapping[str, MessageHandler]:
    table: dict[str, MessageHandler] = {}
    for key, handler in (handlers or {}).items():
        # Last registration for a key wins
        table[header_value(key)] = handler
    return MappingProxyType(table)


class _HeaderDispatcher(ABC):
    """Shared lookup and reporting logic for the dispatchers."""

    header: DefinedHeader

    def __init__(
        self,
        handlers: HandlerTable | None,
        default_handler: MessageHandler,
        observer: DispatchObserver | None,
        name: str | None,
    ):
        self._handlers = _freeze(handlers)
        self._default_handler = default_handler
        self._observer = observer
        self._name = name or type(self).__name__

    @property
    def name(self) -> str:
        return self._name

    @property
    def handlers(self) -> Mapping[str, MessageHandler]:
        """Read-only view of the dispatch table."""
        return self._handlers

    @property
    def default_handler(self) -> MessageHandler:
        return self._default_handler

    def handler_for(self, key: str) -> MessageHandler:
        """The handler a present header value resolves to."""
        return self._handlers.get(key, self._default_handler)

    def _report(
        self,
        event_type: DispatchEventType,
        envelope: Envelope,
        value: str | None = None,
        detail: str | None = None,
    ) -> None:
        logger.warning(
            f"{self._name}: {event_type.value} for envelope {envelope.id} "
            f"({self.header.value}={value!r})"
        )
        if self._observer is not None:
            self._observer(DispatchEvent(
                event_type=event_type,
                envelope_id=envelope.id,
                component=self._name,
                header=self.header.value,
                value=value,
                detail=detail,
            ))

    def __call__(self, envelope: Envelope) -> None:
        self.dispatch(envelope)

    @abstractmethod
    def dispatch(self, envelope: Envelope) -> None:
        """Hand the envelope to exactly one handler."""
        ...


class TypeDispatcher(_HeaderDispatcher):
    """
    Routes envelopes by their Message-Type header.

    Args:
        handlers: Handlers keyed by message type (MessageType members or
            custom type strings)
        simple: Shortcut for the Simple type
        reply: Shortcut for the Reply type
        command: Shortcut for the Command type, usually a CommandDispatcher
        default_handler: Runs for a Message-Type with no handler
        non_typed_handler: Runs for envelopes without a Message-Type header
        observer: Receives a DispatchEvent for every anomaly
        name: Name used in logs and events

    The shortcuts are applied after ``handlers`` and win over it.
    """

    header = DefinedHeader.MESSAGE_TYPE

    def __init__(
        self,
        handlers: HandlerTable | None = None,
        *,
        simple: MessageHandler | None = None,
        reply: MessageHandler | None = None,
        command: MessageHandler | None = None,
        default_handler: MessageHandler = do_nothing,
        non_typed_handler: MessageHandler = do_nothing,
        observer: DispatchObserver | None = None,
        name: str | None = None,
    ):
        table: dict[str | Enum, MessageHandler] = dict(handlers or {})
        shortcuts = {
            MessageType.SIMPLE: simple,
            MessageType.REPLY: reply,
            MessageType.COMMAND: command,
        }
        for message_type, handler in shortcuts.items():
            if handler is not None:
                table[message_type] = handler
        super().__init__(table, default_handler, observer, name)
        self._non_typed_handler = non_typed_handler

    @property
    def non_typed_handler(self) -> MessageHandler:
        return self._non_typed_handler

    def dispatch(self, envelope: Envelope) -> None:
        """Hand the envelope to exactly one handler."""
        if envelope is None:
            logger.warning(f"{self._name} received a null envelope, skipping it")
            return

        message_type = envelope.message_type
        if message_type is None:
            self._report(DispatchEventType.NON_TYPED, envelope)
            self._non_typed_handler(envelope)
            return

        handler = self._handlers.get(message_type)
        if handler is None:
            self._report(DispatchEventType.UNKNOWN_TYPE, envelope, message_type)
            handler = self._default_handler
        else:
            logger.debug(f"{self._name}: {envelope.id} -> type {message_type}")
        handler(envelope)


class CommandDispatcher(_HeaderDispatcher):
    """
    Routes Command envelopes by their Command header.

    Args:
        handlers: Handlers keyed by command
        default_handler: Runs for unknown commands and for envelopes
            without a Command header
        observer: Receives a DispatchEvent for every anomaly
        name: Name used in logs and events
    """

    header = DefinedHeader.COMMAND

    def __init__(
        self,
        handlers: HandlerTable | None = None,
        *,
        default_handler: MessageHandler = do_nothing,
        observer: DispatchObserver | None = None,
        name: str | None = None,
    ):
        super().__init__(handlers, default_handler, observer, name)

    def dispatch(self, envelope: Envelope) -> None:
        """Hand the envelope to exactly one handler."""
        if envelope is None:
            logger.warning(f"{self._name} received a null envelope, skipping it")
            return

        command = envelope.header(DefinedHeader.COMMAND)
        if command is None:
            self._report(
                DispatchEventType.MISSING_COMMAND,
                envelope,
                detail="Command envelope without a Command header",
            )
            self._default_handler(envelope)
            return

        handler = self._handlers.get(command)
        if handler is None:
            self._report(DispatchEventType.UNKNOWN_COMMAND, envelope, command)
            handler = self._default_handler
        else:
            logger.debug(f"{self._name}: {envelope.id} -> command {command}")
        handler(envelope)
