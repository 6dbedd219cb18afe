"""Session event names and lifecycle payloads."""

from dataclasses import dataclass
from enum import Enum


class Event(str, Enum):
    """Events emitted by an AgentSession."""

    # Lifecycle
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"
    RECONNECT_FAILED = "reconnectFailed"

    # Protocol
    MESSAGE = "message"
    CHUNK = "chunk"
    COMPLETE = "complete"
    MESSAGE_CREATED = "messageCreated"
    THREAD_INFO = "threadInfo"
    THREAD_HISTORY = "threadHistory"
    TYPING = "typing"
    TOOL_USE = "toolUse"
    STATUS = "status"
    TOKEN_USAGE = "tokenUsage"
    RUN_PAUSED = "runPaused"
    CONTINUATION_MODE_UPDATED = "continuationModeUpdated"
    CONTINUE_RUN_RESULT = "continueRunResult"
    CONNECTION_STATUS = "connectionStatus"
    AGENT_STATE = "agentState"
    RAW_MESSAGE = "rawMessage"


@dataclass
class DisconnectInfo:
    """Payload of the ``disconnected`` event."""

    code: int
    reason: str


@dataclass
class ReconnectFailed:
    """Payload of the ``reconnectFailed`` event."""

    attempts: int
