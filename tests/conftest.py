from datetime import datetime, timezone
from typing import Callable, List

import pytest

from messenger.protocol.envelope import Envelope
from messenger.routing.events import DispatchEvent

# tests/conftest.py


FIXED_TIME = datetime(2024, 5, 17, 9, 30, 15, 123000, tzinfo=timezone.utc)


class Recorder:
    """Handler that remembers every envelope it receives."""

    def __init__(self, name: str = "recorder"):
        self.name = name
        self.received: List[Envelope] = []

    def __call__(self, envelope: Envelope) -> None:
        self.received.append(envelope)

    @property
    def calls(self) -> int:
        return len(self.received)


@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def recorder() -> Callable[..., Recorder]:
    """
    Return a factory of recording handlers.
    Usage: on_simple = recorder("simple")
    """
    def _make(name: str = "recorder") -> Recorder:
        return Recorder(name)
    return _make


@pytest.fixture
def events() -> List[DispatchEvent]:
    """List collecting dispatch events; its append method is the observer."""
    return []


@pytest.fixture
def make_envelope(fixed_time) -> Callable[..., Envelope]:
    """
    Return a helper constructing envelopes directly, bypassing the builder.
    Usage: envelope = make_envelope(headers={"Message-Type": "Simple"})
    """
    def _make(
        id: str = "env-1",
        sender: str = "tester",
        headers: dict = None,
        payload: str = "",
    ) -> Envelope:
        return Envelope(
            id=id,
            sender=sender,
            timestamp=fixed_time,
            headers=headers or {},
            payload=payload,
        )
    return _make


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep the messenger configuration variables out of every test by default."""
    monkeypatch.delenv("MESSENGER_SENDER", raising=False)
    monkeypatch.delenv("MESSENGER_CONTENT_TYPE", raising=False)
    yield
