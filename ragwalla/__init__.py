"""Ragwalla agents client."""

__version__ = "0.1.0"

from .client import Ragwalla
from .config import RagwallaConfig, WebSocketConfig
from .errors import (
    ConfigurationError,
    ConnectionFailedError,
    NotConnectedError,
    PreconditionError,
    RagwallaAPIError,
    RagwallaError,
)
from .event_bus import EventDispatcher, IEventDispatcher
from .http import AgentsResource, HTTPClient
from .logging_config import setup_logging
from .models import (
    Agent,
    AgentList,
    ChatMessage,
    ConnectionToken,
    ContinuationMode,
    DisconnectInfo,
    Event,
    ReconnectFailed,
    WireMessage,
)
from .protocol import DecodeError, decode, encode, encode_chat_message
from .realtime import (
    AgentSession,
    ContinuationController,
    IAgentSession,
    ReconnectionSupervisor,
    SessionState,
    WebSocketTransport,
)

__all__ = [
    "__version__",
    # Client
    "Ragwalla",
    "RagwallaConfig",
    "WebSocketConfig",
    "setup_logging",
    # Errors
    "RagwallaError",
    "ConfigurationError",
    "PreconditionError",
    "NotConnectedError",
    "ConnectionFailedError",
    "RagwallaAPIError",
    # Models
    "Agent",
    "AgentList",
    "ConnectionToken",
    "ChatMessage",
    "ContinuationMode",
    "Event",
    "DisconnectInfo",
    "ReconnectFailed",
    "WireMessage",
    # Protocol
    "DecodeError",
    "decode",
    "encode",
    "encode_chat_message",
    # Components
    "IEventDispatcher",
    "EventDispatcher",
    "IAgentSession",
    "AgentSession",
    "SessionState",
    "ReconnectionSupervisor",
    "ContinuationController",
    "WebSocketTransport",
    "HTTPClient",
    "AgentsResource",
]
