"""Data models for the Ragwalla client."""

from .messages import ChatMessage, ContinuationMode, Role
from .events import DisconnectInfo, Event, ReconnectFailed
from .wire import (
    AgentState,
    ConnectionStatus,
    ContentChunk,
    ContinuationModeUpdated,
    ContinueRunResult,
    ConversationMessage,
    ErrorMessage,
    MessageComplete,
    MessageCreated,
    RunPaused,
    StatusUpdate,
    ThreadHistory,
    ThreadInfo,
    TokenUsage,
    ToolUse,
    TypingIndicator,
    UnrecognizedMessage,
    WireMessage,
)
from .api import Agent, AgentList, ConnectionToken

__all__ = [
    # Messages
    "ChatMessage",
    "ContinuationMode",
    "Role",
    # Events
    "Event",
    "DisconnectInfo",
    "ReconnectFailed",
    # Wire
    "WireMessage",
    "ConversationMessage",
    "ContentChunk",
    "MessageComplete",
    "MessageCreated",
    "ThreadInfo",
    "ThreadHistory",
    "TypingIndicator",
    "ToolUse",
    "StatusUpdate",
    "TokenUsage",
    "ErrorMessage",
    "RunPaused",
    "ContinuationModeUpdated",
    "ContinueRunResult",
    "ConnectionStatus",
    "AgentState",
    "UnrecognizedMessage",
    # REST
    "Agent",
    "AgentList",
    "ConnectionToken",
]
