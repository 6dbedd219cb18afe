"""Agent lookup and realtime token issuance."""

from typing import Literal

from ..models import Agent, AgentList, ConnectionToken
from .client import HTTPClient


class AgentsResource:
    """The subset of /agents the realtime client depends on."""

    def __init__(self, client: HTTPClient):
        self._client = client

    async def list(
        self,
        limit: int | None = None,
        order: Literal["asc", "desc"] | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> AgentList:
        """List agents."""
        body = await self._client.get(
            "/agents",
            {"limit": limit, "order": order, "after": after, "before": before},
        )
        return AgentList.model_validate(body)

    async def retrieve(self, agent_id: str) -> Agent:
        """Retrieve an agent by ID."""
        body = await self._client.get(f"/agents/{agent_id}")
        return Agent.model_validate(body)

    async def get_token(
        self,
        agent_id: str | None = None,
        expires_in: int | None = None,
    ) -> ConnectionToken:
        """Issue a bearer token for AgentSession.connect()."""
        params = {"agent_id": agent_id, "expires_in": expires_in}
        body = await self._client.post(
            "/agents/auth/websocket",
            {k: v for k, v in params.items() if v is not None},
        )
        return ConnectionToken.model_validate(body)
