"""Tests for the Ragwalla facade."""

import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from conftest import BASE_URL
from ragwalla import Ragwalla, RagwallaConfig
from ragwalla.http import HTTPClient
from ragwalla.realtime import SessionState


def token_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/v1/agents/auth/websocket":
        return httpx.Response(200, json={"token": "tok_live"})
    return httpx.Response(404, json={"error": {"message": "not found"}})


@pytest.fixture
def config():
    """Create client config."""
    return RagwallaConfig(api_key="key_123", base_url=BASE_URL)


@pytest.fixture
def client(config):
    """Create Ragwalla client over a mock HTTP transport."""
    http = HTTPClient(
        api_key=config.api_key,
        base_url=config.base_url,
        transport=httpx.MockTransport(token_handler),
    )
    return Ragwalla(config, http_client=http)


class TestRagwalla:
    """Tests for the Ragwalla client."""

    def test_create_websocket(self, client, transport_factory):
        """Test sessions inherit the client's endpoint."""
        session = client.create_websocket(
            reconnect_attempts=5,
            continuation_mode="manual",
            transport_factory=transport_factory,
        )

        assert session.endpoint == "wss://acme.ai.ragwalla.com/v1"
        assert session.continuation_mode == "manual"
        assert session.state is SessionState.IDLE

    @pytest.mark.asyncio
    async def test_open_session(self, client, transport_factory):
        """Test open_session fetches a token and connects with it."""
        session = await client.open_session(
            "agent_1",
            "support",
            thread_id="thread_1",
            transport_factory=transport_factory,
        )

        query = parse_qs(urlparse(transport_factory.urls[0]).query)
        assert session.is_connected
        assert query["token"] == ["tok_live"]
        assert query["thread_id"] == ["thread_1"]

        await session.send_message({"content": "hi"})
        assert json.loads(transport_factory.latest.sent[0])["content"] == "hi"

        await session.disconnect()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_context_manager(self, config):
        """Test async with closes HTTP resources."""
        closed = []

        class ClosingHTTP(HTTPClient):
            async def aclose(self):
                closed.append(True)
                await super().aclose()

        http = ClosingHTTP(api_key=config.api_key, base_url=config.base_url)
        async with Ragwalla(config, http_client=http):
            pass

        assert closed == [True]

    def test_from_env(self, monkeypatch):
        """Test from_env builds config from the environment."""
        monkeypatch.setenv("RAGWALLA_API_KEY", "env_key")
        monkeypatch.setenv("RAGWALLA_BASE_URL", BASE_URL)

        client = Ragwalla.from_env()

        assert client.config.api_key == "env_key"
        assert client.config.base_url == BASE_URL
