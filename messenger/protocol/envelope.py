"""
Message Envelope Model

Every message handled by the messenger uses a fixed envelope structure:
- id: unique identifier of the logical message
- sender: identification of the origin
- timestamp: when the message was created
- headers: string metadata, including the dispatch keys (see headers.py)
- payload: raw encoded content, opaque to the envelope itself

The payload schema is determined by the Content-Type header; decoding is the
job of a payload decoder (see messenger.payload).

Envelopes are constructed once (normally by an EnvelopeBuilder), read many
times and discarded. They never change after construction.
"""

from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from messenger.protocol.headers import DefinedHeader, MessageType, header_value


class EnvelopeValidationError(ValueError):
    """An envelope could not be built because one of its invariants failed."""
    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)


# Name used by the builder contract
InvalidEnvelopeError = EnvelopeValidationError


def is_blank(value: Any) -> bool:
    """True for anything that is not a string with at least one non-space character."""
    return not isinstance(value, str) or not value.strip()


class Envelope(BaseModel):
    """
    The immutable message envelope.

    Headers are exposed through a read-only mapping over a private copy, so
    neither the caller nor the builder can change them after construction.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        description="Unique identifier for this message"
    )
    sender: str = Field(
        ...,
        description="Identification of the sender, lets the recipient know who sent the message"
    )
    timestamp: datetime = Field(
        ...,
        description="When the message was created"
    )
    headers: Mapping[str, str] = Field(
        default_factory=dict,
        description="Message metadata. Keys are unique, keys and values must have text"
    )
    payload: str = Field(
        default="",
        description="Raw encoded payload. Its format is given by the Content-Type header"
    )

    @field_validator("id")
    @classmethod
    def _id_has_text(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("The id must have text")
        return v

    @field_validator("sender")
    @classmethod
    def _sender_has_text(cls, v: str) -> str:
        if is_blank(v):
            raise ValueError("The sender must have text")
        return v

    @field_validator("headers")
    @classmethod
    def _headers_have_text(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        if any(is_blank(key) or is_blank(value) for key, value in v.items()):
            raise ValueError("All the headers key and value must have text")
        return v

    @model_validator(mode="after")
    def _freeze_headers(self) -> "Envelope":
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        return self

    @field_serializer("headers")
    def _serialize_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        return dict(headers)

    # === Value semantics ===

    def __hash__(self) -> int:
        return hash((self.id, self.sender, self.timestamp, frozenset(self.headers.items()), self.payload))

    def __deepcopy__(self, memo: dict[int, Any] | None = None) -> "Envelope":
        # Every field is immutable, so a shallow copy shares nothing mutable
        return self.__copy__()

    def __getstate__(self) -> dict[Any, Any]:
        state = super().__getstate__()
        state["__dict__"] = {**state["__dict__"], "headers": dict(self.headers)}
        return state

    def __setstate__(self, state: dict[Any, Any]) -> None:
        super().__setstate__(state)
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    # === Convenience accessors ===

    def header(self, key: "str | DefinedHeader", default: str | None = None) -> str | None:
        """Return the value of a header, or ``default`` if it is absent."""
        return self.headers.get(header_value(key), default)

    @property
    def message_type(self) -> str | None:
        return self.header(DefinedHeader.MESSAGE_TYPE)

    @property
    def content_type(self) -> str | None:
        return self.header(DefinedHeader.CONTENT_TYPE)

    @property
    def replies_to(self) -> str | None:
        return self.header(DefinedHeader.REPLIES_TO)

    @property
    def command(self) -> str | None:
        """
        The requested command, for Command envelopes only.

        Non-command envelopes always report None, even if they happen to
        carry a Command header.
        """
        if self.message_type != MessageType.COMMAND.value:
            return None
        return self.header(DefinedHeader.COMMAND)
