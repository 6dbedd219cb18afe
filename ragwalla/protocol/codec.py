"""Wire codec for the realtime channel.

Inbound envelopes are JSON objects tagged by ``type``. Payload fields are
read from the envelope's ``data`` object when present, otherwise from the
envelope itself; both camelCase and snake_case spellings are accepted.
Nothing in this module raises on bad input: malformed JSON becomes a
``DecodeError`` value and malformed fields become ``None``.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from ..models.messages import ChatMessage
from ..models.wire import (
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


@dataclass
class DecodeError:
    """Inbound text that could not be decoded into an envelope."""

    raw: str
    reason: str


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def _get(body: dict, *keys: str) -> Any:
    for key in keys:
        value = body.get(key)
        if value is not None:
            return value
    return None


def _str(body: dict, *keys: str) -> str | None:
    value = _get(body, *keys)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _number(body: dict, *keys: str) -> int | float | None:
    value = _get(body, *keys)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _int(body: dict, *keys: str) -> int | None:
    value = _number(body, *keys)
    return int(value) if value is not None else None


def _bool(body: dict, *keys: str) -> bool | None:
    value = _get(body, *keys)
    return value if isinstance(value, bool) else None


def _dict(body: dict, *keys: str) -> dict:
    value = _get(body, *keys)
    return value if isinstance(value, dict) else {}


def _list(body: dict, *keys: str) -> list:
    value = _get(body, *keys)
    return value if isinstance(value, list) else []


def _body(envelope: dict) -> dict:
    data = envelope.get("data")
    return data if isinstance(data, dict) else envelope


# ---------------------------------------------------------------------------
# Per-tag parsers
# ---------------------------------------------------------------------------


def _parse_message(body: dict, envelope: dict) -> ConversationMessage:
    return ConversationMessage(
        content=_str(body, "content") or "",
        role=_str(body, "role"),
        thread_id=_str(body, "threadId", "thread_id"),
        message_id=_str(body, "messageId", "message_id", "id"),
        metadata=_dict(body, "metadata"),
        timestamp=_str(body, "timestamp") or _str(envelope, "timestamp"),
        raw=envelope,
    )


def _parse_chunk(body: dict, envelope: dict) -> ContentChunk:
    return ContentChunk(
        content=_str(body, "content") or "",
        message_id=_str(body, "messageId", "message_id"),
        thread_id=_str(body, "threadId", "thread_id"),
        raw=envelope,
    )


def _parse_complete(body: dict, envelope: dict) -> MessageComplete:
    return MessageComplete(
        message_id=_str(body, "messageId", "message_id"),
        thread_id=_str(body, "threadId", "thread_id"),
        content=_str(body, "content"),
        raw=envelope,
    )


def _parse_message_created(body: dict, envelope: dict) -> MessageCreated:
    return MessageCreated(
        message_id=_str(body, "messageId", "message_id"),
        role=_str(body, "role"),
        thread_id=_str(body, "threadId", "thread_id"),
        raw=envelope,
    )


def _parse_thread_info(body: dict, envelope: dict) -> ThreadInfo:
    return ThreadInfo(
        thread_id=_str(body, "threadId", "thread_id"),
        assistant_id=_str(body, "assistantId", "assistant_id"),
        is_new_thread=_bool(body, "isNewThread", "is_new_thread"),
        raw=envelope,
    )


def _parse_thread_history(body: dict, envelope: dict) -> ThreadHistory:
    return ThreadHistory(
        thread_id=_str(body, "threadId", "thread_id"),
        messages=_list(body, "messages"),
        raw=envelope,
    )


def _parse_typing(body: dict, envelope: dict) -> TypingIndicator:
    return TypingIndicator(
        is_typing=bool(_bool(body, "isTyping", "is_typing")),
        raw=envelope,
    )


def _parse_tool_use(body: dict, envelope: dict) -> ToolUse:
    return ToolUse(tools=_list(body, "tools"), raw=envelope)


def _parse_status(body: dict, envelope: dict) -> StatusUpdate:
    return StatusUpdate(
        status=_str(body, "status"),
        message=_str(body, "message"),
        tool_name=_str(body, "toolName", "tool_name"),
        tool_call_id=_str(body, "toolCallId", "tool_call_id"),
        tool_type=_str(body, "toolType", "tool_type"),
        server_name=_str(body, "serverName", "server_name"),
        progress=_number(body, "progress"),
        total=_number(body, "total"),
        raw=envelope,
    )


def _parse_token_usage(body: dict, envelope: dict) -> TokenUsage:
    usage = _dict(body, "usage") or body
    return TokenUsage(
        prompt_tokens=_int(usage, "promptTokens", "prompt_tokens"),
        completion_tokens=_int(usage, "completionTokens", "completion_tokens"),
        total_tokens=_int(usage, "totalTokens", "total_tokens"),
        raw=envelope,
    )


def _parse_error(body: dict, envelope: dict) -> ErrorMessage:
    detail = _dict(body, "error")
    message = (
        _str(body, "error")
        or _str(detail, "message")
        or _str(body, "message")
        or _str(envelope, "data")
        or ""
    )
    return ErrorMessage(
        error=message,
        code=_str(detail, "code") or _str(body, "code"),
        data=envelope.get("data"),
        raw=envelope,
    )


def _parse_run_paused(body: dict, envelope: dict) -> RunPaused:
    return RunPaused(
        run_id=_str(body, "runId", "run_id"),
        reason=_str(body, "reason"),
        stats=_dict(body, "stats"),
        raw=envelope,
    )


def _parse_continuation_mode_updated(
    body: dict, envelope: dict
) -> ContinuationModeUpdated:
    return ContinuationModeUpdated(
        mode=_str(body, "continuationMode", "continuation_mode", "mode"),
        success=_bool(body, "success"),
        message=_str(body, "message"),
        raw=envelope,
    )


def _parse_continue_run_result(body: dict, envelope: dict) -> ContinueRunResult:
    return ContinueRunResult(
        run_id=_str(body, "runId", "run_id"),
        success=_bool(body, "success"),
        message=_str(body, "message", "error"),
        raw=envelope,
    )


def _parse_connection_status(body: dict, envelope: dict) -> ConnectionStatus:
    return ConnectionStatus(status=_str(body, "status"), data=body, raw=envelope)


def _parse_agent_state(body: dict, envelope: dict) -> AgentState:
    return AgentState(state=_dict(body, "state"), raw=envelope)


_PARSERS: dict[str, Callable[[dict, dict], WireMessage]] = {
    "message": _parse_message,
    "chat_message": _parse_message,
    "chunk": _parse_chunk,
    "complete": _parse_complete,
    "message_created": _parse_message_created,
    "thread_info": _parse_thread_info,
    "thread_history": _parse_thread_history,
    "typing": _parse_typing,
    "tool_use": _parse_tool_use,
    "status": _parse_status,
    "token_usage": _parse_token_usage,
    "error": _parse_error,
    "run_paused": _parse_run_paused,
    "continuation_mode_updated": _parse_continuation_mode_updated,
    "continue_run_result": _parse_continue_run_result,
    "connection_status": _parse_connection_status,
    "connected": _parse_connection_status,
    "cf_agent_state": _parse_agent_state,
}

KNOWN_TAGS = frozenset(_PARSERS)


def parse_envelope(envelope: dict) -> WireMessage:
    """Map a decoded JSON object onto its wire message variant."""
    tag = envelope.get("type")
    parser = _PARSERS.get(tag) if isinstance(tag, str) else None
    if parser is None:
        return UnrecognizedMessage(
            type=tag if isinstance(tag, str) else None,
            envelope=envelope,
        )
    return parser(_body(envelope), envelope)


def decode(raw: str | bytes) -> WireMessage | DecodeError:
    """Decode one inbound frame."""
    if isinstance(raw, (bytes, bytearray)):
        text = bytes(raw).decode("utf-8", errors="replace")
    else:
        text = raw

    try:
        envelope = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        return DecodeError(raw=str(text), reason=str(e))

    if not isinstance(envelope, dict):
        return DecodeError(raw=text, reason="Envelope is not a JSON object")

    return parse_envelope(envelope)


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


def encode(payload: dict) -> str:
    """Serialize an arbitrary structured payload."""
    return json.dumps(payload)


def encode_chat_message(
    message: ChatMessage, timestamp: datetime | None = None
) -> str:
    """Serialize a conversational message.

    The server expects ``content``/``role``/``timestamp`` at the top level of
    the envelope; a nested ``data`` object is ignored by it. The timestamp is
    the explicit argument, else the message's own, else the current time.
    """
    if timestamp is not None:
        sent_at = timestamp.isoformat()
    elif message.timestamp:
        sent_at = message.timestamp
    else:
        sent_at = datetime.now(timezone.utc).isoformat()

    envelope: dict[str, Any] = {
        "type": "message",
        "content": message.content,
        "role": message.role,
        "timestamp": sent_at,
    }
    if message.metadata:
        envelope["metadata"] = message.metadata
    return encode(envelope)


def continuation_mode_message(mode: str) -> dict[str, Any]:
    """Control message switching the continuation mode."""
    return {"type": "set_continuation_mode", "continuation_mode": mode}


def continue_run_message(run_id: str) -> dict[str, Any]:
    """Control message resuming a paused run."""
    return {"type": "continue_run", "run_id": run_id}
