"""
Envelope Wire Format

Maps envelopes to and from the JSON object exchanged between processes:

    {"id": "...", "sn": "<sender>", "ts": <epoch millis>, "hs": {...}, "pl": "<payload>"}

The five field names are fixed; peers rely on them for compatibility.
Timestamps travel as integer epoch milliseconds, so sub-millisecond
precision is lost and decoded timestamps are UTC-aware.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from messenger.protocol.envelope import Envelope, InvalidEnvelopeError

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


class WireFormatError(ValueError):
    """Data is not a well-formed wire envelope."""
    pass


class WireEnvelope(BaseModel):
    """The envelope as it appears on the wire."""

    model_config = ConfigDict(strict=True, extra="forbid")

    id: str
    sn: str
    ts: int
    hs: dict[str, str]
    pl: str


def to_epoch_millis(timestamp: datetime) -> int:
    # Naive timestamps are taken as UTC
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return (timestamp - _EPOCH) // _MILLISECOND


def from_epoch_millis(millis: int) -> datetime:
    return _EPOCH + millis * _MILLISECOND


def _to_wire_model(envelope: Envelope) -> WireEnvelope:
    return WireEnvelope(
        id=envelope.id,
        sn=envelope.sender,
        ts=to_epoch_millis(envelope.timestamp),
        hs=dict(envelope.headers),
        pl=envelope.payload,
    )


def to_wire(envelope: Envelope) -> dict[str, Any]:
    """Return the wire representation of an envelope as a plain dict."""
    return _to_wire_model(envelope).model_dump()


def _to_envelope(wire: WireEnvelope) -> Envelope:
    try:
        timestamp = from_epoch_millis(wire.ts)
    except (OverflowError, ValueError) as e:
        raise WireFormatError(f"Timestamp out of range: {wire.ts}") from e

    try:
        return Envelope(
            id=wire.id,
            sender=wire.sn,
            timestamp=timestamp,
            headers=wire.hs,
            payload=wire.pl,
        )
    except ValidationError as e:
        raise InvalidEnvelopeError(
            f"Invalid envelope: {'; '.join(err['msg'] for err in e.errors())}",
            errors=e.errors(),
        ) from e


def from_wire(data: dict[str, Any]) -> Envelope:
    """
    Build an envelope from its wire representation.

    Raises:
        WireFormatError: If fields are missing, extra or of the wrong type,
            or the timestamp is out of range
        InvalidEnvelopeError: If the fields are well-formed but break an
            envelope invariant (e.g. a blank sender)
    """
    try:
        wire = WireEnvelope.model_validate(data)
    except ValidationError as e:
        raise WireFormatError(f"Malformed wire envelope: {e}") from e
    return _to_envelope(wire)


def dumps(envelope: Envelope) -> str:
    """Serialize an envelope to its JSON wire form."""
    return _to_wire_model(envelope).model_dump_json()


def loads(text: str | bytes) -> Envelope:
    """
    Parse an envelope from its JSON wire form.

    Raises:
        WireFormatError: If the text is not valid JSON, not a wire envelope
            or carries an out-of-range timestamp
        InvalidEnvelopeError: If the envelope invariants fail
    """
    try:
        wire = WireEnvelope.model_validate_json(text)
    except ValidationError as e:
        logger.warning(f"Invalid wire envelope: {e}")
        raise WireFormatError(f"Malformed wire envelope: {e}") from e
    return _to_envelope(wire)
