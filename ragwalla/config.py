"""Client configuration and endpoint helpers."""

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

from .errors import ConfigurationError
from .models.messages import ContinuationMode

CONTINUATION_MODES: tuple[str, ...] = ("auto", "manual")
DEFAULT_RECONNECT_ATTEMPTS = 3
DEFAULT_RECONNECT_DELAY = 1.0  # seconds
DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_CONTINUATION_MODE: ContinuationMode = "auto"

# https://<org>.ai.ragwalla.com/v1
ENDPOINT_PATTERN = re.compile(
    r"^(?P<scheme>https|wss)://(?P<host>[a-zA-Z0-9-]+\.ai\.ragwalla\.com)/v1/?$"
)


def resolve_base_url(base_url: str | None) -> str:
    """Validate the API base URL and strip a trailing slash."""
    if not base_url:
        raise ConfigurationError("base_url is required")

    if not ENDPOINT_PATTERN.match(base_url):
        raise ConfigurationError(
            "base_url must follow the pattern: https://example.ai.ragwalla.com/v1\n"
            f"Received: {base_url}"
        )

    return base_url.rstrip("/")


def to_websocket_url(base_url: str) -> str:
    """Map a validated base URL onto the wss:// channel endpoint."""
    match = ENDPOINT_PATTERN.match(resolve_base_url(base_url))
    return f"wss://{match.group('host')}/v1"


def validate_continuation_mode(mode: str) -> ContinuationMode:
    """Return the mode unchanged if it is one of auto/manual."""
    if mode not in CONTINUATION_MODES:
        raise ConfigurationError(
            f"continuation_mode must be 'auto' or 'manual', got {mode!r}"
        )
    return mode  # type: ignore[return-value]


@dataclass
class WebSocketConfig:
    """Options for a realtime agent session."""

    base_url: str
    reconnect_attempts: int = DEFAULT_RECONNECT_ATTEMPTS
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    continuation_mode: ContinuationMode = DEFAULT_CONTINUATION_MODE
    debug: bool = False

    def __post_init__(self) -> None:
        self.base_url = resolve_base_url(self.base_url)
        validate_continuation_mode(self.continuation_mode)
        if self.reconnect_attempts < 0:
            raise ConfigurationError("reconnect_attempts must be >= 0")
        if self.reconnect_delay < 0:
            raise ConfigurationError("reconnect_delay must be >= 0")


@dataclass
class RagwallaConfig:
    """Options for the top-level client."""

    api_key: str
    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("Ragwalla API key is required")
        self.base_url = resolve_base_url(self.base_url)

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "RagwallaConfig":
        """Build config from RAGWALLA_* environment variables (and .env)."""
        load_dotenv(env_file)

        return cls(
            api_key=os.getenv("RAGWALLA_API_KEY", ""),
            base_url=os.getenv("RAGWALLA_BASE_URL", ""),
            timeout=float(os.getenv("RAGWALLA_TIMEOUT", str(DEFAULT_TIMEOUT))),
            debug=os.getenv("RAGWALLA_DEBUG", "").lower() in ("1", "true", "yes"),
        )
