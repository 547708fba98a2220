"""
Payload Codec Port Interfaces

Abstract base classes for the payload codecs plugged into the messenger.

The envelope treats its payload as an opaque string. Codecs turn application
values into that string and back, and declare the Content-Type tag they
handle so that encoding and decoding stay consistent:
- the builder stamps the encoder's tag on the envelope it builds
- the content-negotiating decoder only decodes envelopes carrying its tag

Codecs signal failures with PayloadEncodingError / PayloadDecodingError.
The dispatch layer turns decoding failures into fallback invocations.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ContentTypeHandler(ABC):
    """Something that handles exactly one content type."""

    @property
    @abstractmethod
    def content_type(self) -> str:
        """The Content-Type tag this handler produces or consumes."""
        ...


class PayloadEncoder(ContentTypeHandler, Generic[T]):
    """Turns application values into raw envelope payloads."""

    @abstractmethod
    def encode(self, value: T) -> str:
        """
        Encode a value.

        Args:
            value: The value to encode

        Returns:
            The raw payload string

        Raises:
            PayloadEncodingError: If the value cannot be encoded
        """
        ...


class PayloadDecoder(ContentTypeHandler, Generic[T]):
    """Turns raw envelope payloads into application values."""

    @abstractmethod
    def decode(self, raw: str) -> T:
        """
        Decode a raw payload.

        Args:
            raw: The payload string carried by the envelope

        Returns:
            The decoded value

        Raises:
            PayloadDecodingError: If the payload is malformed for this codec
        """
        ...


# =============================================================================
# Exceptions
# =============================================================================

class PayloadError(Exception):
    """Base exception for payload codec errors."""
    pass


class PayloadEncodingError(PayloadError):
    """A value could not be encoded."""
    def __init__(self, value_type: type, message: str | None = None):
        self.value_type = value_type
        detail = f"Could not serialize instance of type: {value_type.__name__}"
        if message:
            detail = f"{detail}. Message: {message}"
        super().__init__(detail)


class PayloadDecodingError(PayloadError):
    """A raw payload could not be decoded."""
    def __init__(self, raw: str, target: Any = None, message: str | None = None):
        self.raw = raw
        self.target = target
        detail = f"Could not deserialize the string: {raw!r}"
        if target is not None:
            detail = f"{detail} into {target!r}"
        if message:
            detail = f"{detail}. Message: {message}"
        super().__init__(detail)
