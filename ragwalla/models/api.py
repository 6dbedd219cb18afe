"""REST response schemas."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Agent(BaseModel):
    """An agent as returned by the REST API."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    description: str | None = None
    model: str | None = None
    instructions: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: str | int | None = None
    updated_at: str | int | None = None


class AgentList(BaseModel):
    """Response model for agent listing."""

    model_config = ConfigDict(extra="allow")

    object: Literal["list"] = "list"
    data: list[Agent] = Field(default_factory=list)


class ConnectionToken(BaseModel):
    """Bearer token for the realtime channel."""

    model_config = ConfigDict(extra="allow")

    token: str
    expires_at: str | int | None = None
