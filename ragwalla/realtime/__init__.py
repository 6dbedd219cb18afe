"""Realtime module."""

from .continuation import ContinuationController
from .reconnect import ReconnectionSupervisor
from .session import AgentSession, IAgentSession, SessionIdentity, SessionState
from .transport import (
    ITransport,
    TransportClosed,
    TransportError,
    TransportFactory,
    WebSocketTransport,
)

__all__ = [
    "AgentSession",
    "IAgentSession",
    "SessionIdentity",
    "SessionState",
    "ContinuationController",
    "ReconnectionSupervisor",
    "ITransport",
    "TransportClosed",
    "TransportError",
    "TransportFactory",
    "WebSocketTransport",
]
