"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ragwalla.config import WebSocketConfig  # noqa: E402
from ragwalla.realtime import AgentSession, TransportClosed  # noqa: E402

BASE_URL = "https://acme.ai.ragwalla.com/v1"


class FakeTransport:
    """In-memory transport; the test feeds inbound frames."""

    def __init__(self, url: str):
        self.url = url
        self.sent: list[str] = []
        self.closed = False
        self._inbox: asyncio.Queue = asyncio.Queue()

    async def send(self, data: str) -> None:
        if self.closed:
            raise TransportClosed(1000, "closed")
        self.sent.append(data)

    async def recv(self):
        item = await self._inbox.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed = True

    def feed(self, frame) -> None:
        self._inbox.put_nowait(frame)

    def feed_json(self, envelope: dict) -> None:
        self.feed(json.dumps(envelope))

    def drop(self, code: int = 1006, reason: str = "gone") -> None:
        self._inbox.put_nowait(TransportClosed(code, reason))

    def fail(self, error: Exception) -> None:
        self._inbox.put_nowait(error)

    @property
    def sent_json(self) -> list[dict]:
        return [json.loads(frame) for frame in self.sent]


class FakeTransportFactory:
    """Transport factory recording every URL it is asked to open."""

    def __init__(self):
        self.urls: list[str] = []
        self.transports: list[FakeTransport] = []
        self.failures = 0  # number of upcoming handshakes to fail

    async def __call__(self, url: str) -> FakeTransport:
        self.urls.append(url)
        if self.failures:
            self.failures -= 1
            raise OSError("connection refused")
        transport = FakeTransport(url)
        self.transports.append(transport)
        return transport

    @property
    def latest(self) -> FakeTransport:
        return self.transports[-1]


class RecordingSleep:
    """Replaces asyncio.sleep in the reconnect supervisor."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class EventRecorder:
    """Collects (event, payload) pairs from a session."""

    def __init__(self):
        self.events: list[tuple[str, object]] = []

    def listen(self, session: AgentSession, *events) -> None:
        for event in events:
            session.on(event, lambda payload, e=event: self.events.append((e, payload)))

    def of(self, event) -> list:
        return [payload for name, payload in self.events if name == event]

    @property
    def names(self) -> list[str]:
        return [str(getattr(name, "value", name)) for name, _ in self.events]


async def settle(rounds: int = 50) -> None:
    """Let background tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def transport_factory():
    """Create fake transport factory."""
    return FakeTransportFactory()


@pytest.fixture
def fake_sleep():
    """Create recording sleep."""
    return RecordingSleep()


@pytest.fixture
def ws_config():
    """Create default realtime config."""
    return WebSocketConfig(base_url=BASE_URL)


@pytest.fixture
def session(ws_config, transport_factory, fake_sleep):
    """Create AgentSession over fake transports."""
    return AgentSession(ws_config, transport_factory=transport_factory, sleep=fake_sleep)


@pytest_asyncio.fixture
async def connected_session(session):
    """Create AgentSession that is already open."""
    await session.connect("agent_1", "session_a", "tok_123")
    yield session
    await session.disconnect()


@pytest.fixture
def recorder():
    """Create event recorder."""
    return EventRecorder()
