"""Inbound wire messages.

Every envelope received on the realtime channel decodes into exactly one of
the dataclasses below. Tags the client does not know become
``UnrecognizedMessage`` so callers still see them (as ``rawMessage``).

Fields missing from an envelope are ``None`` (``""`` for streamed text,
empty containers for lists and dicts). ``raw`` always holds the full
envelope as received.
"""

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass
class ConversationMessage:
    """``message`` / ``chat_message``: a complete conversational message."""

    content: str = ""
    role: str | None = None
    thread_id: str | None = None
    message_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ContentChunk:
    """``chunk``: a piece of a streamed assistant response."""

    content: str = ""
    message_id: str | None = None
    thread_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class MessageComplete:
    """``complete``: the streamed message is finished."""

    message_id: str | None = None
    thread_id: str | None = None
    content: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class MessageCreated:
    """``message_created``: a new message has started."""

    message_id: str | None = None
    role: str | None = None
    thread_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ThreadInfo:
    """``thread_info``: the thread bound to this session."""

    thread_id: str | None = None
    assistant_id: str | None = None
    is_new_thread: bool | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ThreadHistory:
    """``thread_history``: prior messages of a resumed thread."""

    thread_id: str | None = None
    messages: list[Any] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class TypingIndicator:
    """``typing``."""

    is_typing: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ToolUse:
    """``tool_use``: tools available to or used by the agent."""

    tools: list[Any] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class StatusUpdate:
    """``status``: tool execution progress."""

    status: str | None = None
    message: str | None = None
    tool_name: str | None = None
    tool_call_id: str | None = None
    tool_type: str | None = None
    server_name: str | None = None
    progress: float | None = None
    total: float | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class TokenUsage:
    """``token_usage``."""

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ErrorMessage:
    """``error``: reported by the server, or produced locally for decode and
    transport failures."""

    error: str = ""
    code: str | None = None
    data: Any = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class RunPaused:
    """``run_paused``: a run stopped and may be continued."""

    run_id: str | None = None
    reason: str | None = None
    stats: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ContinuationModeUpdated:
    """``continuation_mode_updated``: server acknowledged a mode change."""

    mode: str | None = None
    success: bool | None = None
    message: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ContinueRunResult:
    """``continue_run_result``: outcome of a continue_run request."""

    run_id: str | None = None
    success: bool | None = None
    message: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ConnectionStatus:
    """``connection_status`` / ``connected``."""

    status: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class AgentState:
    """``cf_agent_state``: agent runtime state snapshot."""

    state: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class UnrecognizedMessage:
    """Any envelope whose tag is not listed above."""

    type: str | None
    envelope: dict[str, Any]


WireMessage = Union[
    ConversationMessage,
    ContentChunk,
    MessageComplete,
    MessageCreated,
    ThreadInfo,
    ThreadHistory,
    TypingIndicator,
    ToolUse,
    StatusUpdate,
    TokenUsage,
    ErrorMessage,
    RunPaused,
    ContinuationModeUpdated,
    ContinueRunResult,
    ConnectionStatus,
    AgentState,
    UnrecognizedMessage,
]
