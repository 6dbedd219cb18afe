"""Transport handles for the realtime channel."""

from typing import Awaitable, Callable, Protocol

import websockets
from websockets.asyncio.client import ClientConnection, connect

from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_OPEN_TIMEOUT = 10.0  # seconds
ABNORMAL_CLOSURE = 1006


class TransportClosed(Exception):
    """The peer or the network closed the channel."""

    def __init__(self, code: int = ABNORMAL_CLOSURE, reason: str = ""):
        super().__init__(f"Connection closed ({code}): {reason}")
        self.code = code
        self.reason = reason


class TransportError(Exception):
    """The channel failed without a close handshake."""


class ITransport(Protocol):
    """One open bidirectional text channel."""

    async def send(self, data: str) -> None:
        """Write one frame. Raises TransportClosed if the channel is gone."""
        ...

    async def recv(self) -> str | bytes:
        """Read the next frame. Raises TransportClosed or TransportError."""
        ...

    async def close(self, code: int = 1000, reason: str = "") -> None:
        """Close the channel."""
        ...


TransportFactory = Callable[[str], Awaitable[ITransport]]


def _closed(e: websockets.ConnectionClosed) -> TransportClosed:
    frame = e.rcvd
    if frame is None:
        return TransportClosed(ABNORMAL_CLOSURE, "")
    return TransportClosed(frame.code, frame.reason)


class WebSocketTransport:
    """ITransport backed by a ``websockets`` client connection."""

    def __init__(self, connection: ClientConnection):
        self._connection = connection

    @classmethod
    async def open(
        cls, url: str, open_timeout: float = DEFAULT_OPEN_TIMEOUT
    ) -> "WebSocketTransport":
        """Perform the opening handshake."""
        connection = await connect(url, open_timeout=open_timeout)
        return cls(connection)

    async def send(self, data: str) -> None:
        try:
            await self._connection.send(data)
        except websockets.ConnectionClosed as e:
            raise _closed(e) from e

    async def recv(self) -> str | bytes:
        try:
            return await self._connection.recv()
        except websockets.ConnectionClosed as e:
            raise _closed(e) from e
        except OSError as e:
            raise TransportError(str(e)) from e

    async def close(self, code: int = 1000, reason: str = "") -> None:
        await self._connection.close(code=code, reason=reason)
        logger.debug("WebSocket closed")
