"""Tests for WebSocketTransport error mapping."""

import pytest
import websockets
from websockets.frames import Close

from ragwalla.realtime import TransportClosed, TransportError, WebSocketTransport


class StubConnection:
    """Stands in for a websockets ClientConnection."""

    def __init__(self, error=None, frame="{}"):
        self.error = error
        self.frame = frame
        self.sent = []
        self.closed_with = None

    async def send(self, data):
        if self.error:
            raise self.error
        self.sent.append(data)

    async def recv(self):
        if self.error:
            raise self.error
        return self.frame

    async def close(self, code=1000, reason=""):
        self.closed_with = (code, reason)


class TestWebSocketTransport:
    """Tests for WebSocketTransport."""

    @pytest.mark.asyncio
    async def test_passthrough(self):
        """Test frames pass through unchanged."""
        connection = StubConnection(frame='{"type": "typing"}')
        transport = WebSocketTransport(connection)

        await transport.send("hello")
        assert await transport.recv() == '{"type": "typing"}'
        assert connection.sent == ["hello"]

    @pytest.mark.asyncio
    async def test_close_frame_code(self):
        """Test a received close frame keeps its code and reason."""
        error = websockets.ConnectionClosed(Close(1011, "server error"), None)
        transport = WebSocketTransport(StubConnection(error=error))

        with pytest.raises(TransportClosed) as exc_info:
            await transport.recv()

        assert exc_info.value.code == 1011
        assert exc_info.value.reason == "server error"

    @pytest.mark.asyncio
    async def test_abnormal_closure(self):
        """Test a close without a frame maps to 1006."""
        error = websockets.ConnectionClosed(None, None)
        transport = WebSocketTransport(StubConnection(error=error))

        with pytest.raises(TransportClosed) as exc_info:
            await transport.send("x")

        assert exc_info.value.code == 1006

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Test socket errors surface as TransportError."""
        transport = WebSocketTransport(StubConnection(error=ConnectionResetError("reset")))

        with pytest.raises(TransportError, match="reset"):
            await transport.recv()

    @pytest.mark.asyncio
    async def test_close(self):
        """Test close forwards code and reason."""
        connection = StubConnection()

        await WebSocketTransport(connection).close(1000, "bye")

        assert connection.closed_with == (1000, "bye")
