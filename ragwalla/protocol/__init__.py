"""Protocol module."""

from .codec import (
    KNOWN_TAGS,
    DecodeError,
    continuation_mode_message,
    continue_run_message,
    decode,
    encode,
    encode_chat_message,
    parse_envelope,
)

__all__ = [
    "KNOWN_TAGS",
    "DecodeError",
    "continuation_mode_message",
    "continue_run_message",
    "decode",
    "encode",
    "encode_chat_message",
    "parse_envelope",
]
