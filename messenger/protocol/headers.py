"""
Well-Known Headers

The fixed header vocabulary understood by the messenger core.

Headers are plain string pairs carried by every envelope. A handful of keys
have a defined meaning and drive dispatch:
- Message-Type -> Simple, Reply or Command (see MessageType)
- Content-Type -> tag of the payload codec (see ContentType)
- Replies-To -> id of the envelope being replied
- Command -> command requested by a Command envelope
- Copy-Headers -> headers the sender wants echoed back in the reply

Callers are free to use any other header key. The vocabulary is extended by
convention, not by adding members here.
"""

from enum import Enum


class DefinedHeader(str, Enum):
    """Header keys with a defined meaning."""
    MESSAGE_TYPE = "Message-Type"
    CONTENT_TYPE = "Content-Type"
    REPLIES_TO = "Replies-To"  # Required by Reply envelopes
    COMMAND = "Command"  # Required by Command envelopes
    COPY_HEADERS = "Copy-Headers"


class MessageType(str, Enum):
    """
    Values of the Message-Type header.

    - Simple: fire-and-forget message
    - Reply: answers another envelope, must carry Replies-To
    - Command: asks the recipient to run a command, must carry Command
    """
    SIMPLE = "Simple"
    REPLY = "Reply"
    COMMAND = "Command"


class ContentType(str, Enum):
    """
    Built-in values of the Content-Type header.

    Custom payload codecs declare their own tags as plain strings.
    """
    PLAIN = "Plain"
    JSON = "JSON"


# Copy-Headers format: <header>[, <header>]*
COPY_HEADERS_SEPARATOR = ", "


def header_value(value: "str | Enum") -> str:
    """
    Return the canonical string form of a header key or value.

    Enum members map to their value (``MessageType.REPLY`` -> ``"Reply"``);
    anything else is returned unchanged so validation can reject it later.
    """
    if isinstance(value, Enum):
        return value.value
    return value
