"""Top-level Ragwalla client."""

import asyncio

from .config import (
    DEFAULT_CONTINUATION_MODE,
    DEFAULT_RECONNECT_ATTEMPTS,
    DEFAULT_RECONNECT_DELAY,
    RagwallaConfig,
    WebSocketConfig,
)
from .http import AgentsResource, HTTPClient
from .logging_config import get_logger
from .models import ContinuationMode
from .realtime import AgentSession, TransportFactory
from .realtime.reconnect import Sleep

logger = get_logger(__name__)


class Ragwalla:
    """Entry point: REST access plus realtime sessions."""

    def __init__(self, config: RagwallaConfig, http_client: HTTPClient | None = None):
        self._config = config
        self._http = http_client or HTTPClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            debug=config.debug,
        )
        self.agents = AgentsResource(self._http)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Ragwalla":
        """Create a client from RAGWALLA_* environment variables."""
        return cls(RagwallaConfig.from_env(env_file))

    @property
    def config(self) -> RagwallaConfig:
        return self._config

    def create_websocket(
        self,
        reconnect_attempts: int = DEFAULT_RECONNECT_ATTEMPTS,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        continuation_mode: ContinuationMode = DEFAULT_CONTINUATION_MODE,
        transport_factory: TransportFactory | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> AgentSession:
        """Create a realtime session against this client's endpoint."""
        ws_config = WebSocketConfig(
            base_url=self._config.base_url,
            reconnect_attempts=reconnect_attempts,
            reconnect_delay=reconnect_delay,
            continuation_mode=continuation_mode,
            debug=self._config.debug,
        )
        return AgentSession(ws_config, transport_factory=transport_factory, sleep=sleep)

    async def open_session(
        self,
        agent_id: str,
        session_tag: str,
        thread_id: str | None = None,
        expires_in: int | None = None,
        **session_options,
    ) -> AgentSession:
        """Fetch a token for ``agent_id`` and return a connected session."""
        token = await self.agents.get_token(agent_id=agent_id, expires_in=expires_in)
        session = self.create_websocket(**session_options)
        await session.connect(agent_id, session_tag, token.token, thread_id=thread_id)
        logger.info("Realtime session %s opened for agent %s", session_tag, agent_id)
        return session

    async def aclose(self) -> None:
        """Release HTTP resources."""
        await self._http.aclose()

    async def __aenter__(self) -> "Ragwalla":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
