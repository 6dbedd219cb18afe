"""Conversational message models."""

from dataclasses import dataclass, field
from typing import Any, Literal, get_args

from ..errors import PreconditionError

Role = Literal["user", "assistant", "system"]
ContinuationMode = Literal["auto", "manual"]

ROLES: tuple[str, ...] = get_args(Role)


@dataclass
class ChatMessage:
    """A message sent to the agent over the realtime channel."""

    content: str
    role: Role = "user"
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """Build a message from a plain dict, validating its shape."""
        unknown = set(data) - {"content", "role", "metadata", "timestamp"}
        if unknown:
            raise PreconditionError(
                f"Unknown message fields: {', '.join(sorted(unknown))}"
            )

        content = data.get("content")
        if not isinstance(content, str):
            raise PreconditionError("Message content must be a string")

        role = data.get("role", "user")
        if role not in ROLES:
            raise PreconditionError(f"Invalid message role: {role!r}")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise PreconditionError("Message metadata must be an object")

        timestamp = data.get("timestamp")
        if timestamp is not None and not isinstance(timestamp, str):
            raise PreconditionError("Message timestamp must be an ISO 8601 string")

        return cls(content=content, role=role, metadata=metadata, timestamp=timestamp)
