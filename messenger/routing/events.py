"""
Dispatch Events

Structured records of routing anomalies: envelopes that reach a fallback
branch because a header is missing, unknown or does not match.

None of these are errors. They are logged, and when an observer callback is
configured they are also handed to it, so applications can count or trace
them without parsing log lines.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field


class DispatchEventType(str, Enum):
    """Kinds of routing anomalies."""
    # Type-level dispatch
    NON_TYPED = "dispatch.non_typed"  # No Message-Type header
    UNKNOWN_TYPE = "dispatch.unknown_type"  # Message-Type with no registered handler

    # Command-level dispatch
    MISSING_COMMAND = "dispatch.missing_command"  # Routed as Command but no Command header
    UNKNOWN_COMMAND = "dispatch.unknown_command"  # Command with no registered handler

    # Content negotiation
    CONTENT_TYPE_MISMATCH = "decode.content_type_mismatch"
    MISSING_CONTENT_TYPE = "decode.missing_content_type"  # Decoding is still attempted
    DECODE_FAILED = "decode.failed"


class DispatchEvent(BaseModel):
    """One routing anomaly, tied to the envelope that caused it."""

    model_config = ConfigDict(frozen=True)

    event_type: DispatchEventType = Field(
        ...,
        description="What happened"
    )
    envelope_id: str = Field(
        ...,
        description="Id of the envelope being routed"
    )
    component: str = Field(
        ...,
        description="Name of the dispatcher or decoder reporting the event"
    )
    header: str | None = Field(
        default=None,
        description="Header the decision was based on"
    )
    value: str | None = Field(
        default=None,
        description="Header value seen, if any"
    )
    detail: str | None = Field(
        default=None,
        description="Extra human-readable context"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was recorded"
    )


DispatchObserver = Callable[[DispatchEvent], None]
