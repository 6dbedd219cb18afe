"""Realtime agent session.

``AgentSession`` owns one transport at a time and turns its frames into
named events. Two contracts are kept apart:

* ``await connect(...)`` reports whether the opening handshake succeeded;
* everything afterwards (messages, disconnects, reconnect outcome) is
  delivered through listeners registered with ``on``.

An unexpected closure hands control to a ``ReconnectionSupervisor`` task
that re-runs the handshake with the same identity. ``disconnect()``
detaches the transport first, so nothing it delivers afterwards reaches a
listener.
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol
from urllib.parse import quote, urlencode

from ..config import WebSocketConfig, to_websocket_url
from ..errors import ConfigurationError, ConnectionFailedError, NotConnectedError
from ..event_bus import EventDispatcher, Listener
from ..logging_config import bind_context, get_logger
from ..models import (
    AgentState,
    ChatMessage,
    ConnectionStatus,
    ContentChunk,
    ContinuationMode,
    ContinuationModeUpdated,
    ContinueRunResult,
    ConversationMessage,
    DisconnectInfo,
    ErrorMessage,
    Event,
    MessageComplete,
    MessageCreated,
    ReconnectFailed,
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
from ..protocol import DecodeError, decode, encode, encode_chat_message
from .continuation import ContinuationController
from .reconnect import ReconnectionSupervisor, Sleep
from .transport import (
    ABNORMAL_CLOSURE,
    ITransport,
    TransportClosed,
    TransportFactory,
    WebSocketTransport,
)

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Lifecycle of an AgentSession."""

    IDLE = "idle"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass(frozen=True)
class SessionIdentity:
    """Who the session talks to; reused verbatim on automatic reconnect."""

    agent_id: str
    session_tag: str
    token: str = field(repr=False)
    thread_id: str | None = None


_EVENTS: dict[type, Event] = {
    ConversationMessage: Event.MESSAGE,
    MessageComplete: Event.COMPLETE,
    MessageCreated: Event.MESSAGE_CREATED,
    ThreadInfo: Event.THREAD_INFO,
    ThreadHistory: Event.THREAD_HISTORY,
    TypingIndicator: Event.TYPING,
    ToolUse: Event.TOOL_USE,
    StatusUpdate: Event.STATUS,
    TokenUsage: Event.TOKEN_USAGE,
    ErrorMessage: Event.ERROR,
    RunPaused: Event.RUN_PAUSED,
    ContinuationModeUpdated: Event.CONTINUATION_MODE_UPDATED,
    ContinueRunResult: Event.CONTINUE_RUN_RESULT,
    ConnectionStatus: Event.CONNECTION_STATUS,
    AgentState: Event.AGENT_STATE,
}


class IAgentSession(Protocol):
    """Persistent connection to one agent."""

    async def connect(
        self,
        agent_id: str,
        session_tag: str,
        token: str,
        thread_id: str | None = None,
    ) -> None:
        """Open the channel. Resolves once the transport is open."""
        ...

    async def disconnect(self) -> None:
        """Close the channel. No automatic reconnection follows."""
        ...

    async def send_message(self, message: ChatMessage | dict) -> None:
        """Send a conversational message."""
        ...

    async def send(self, payload: dict) -> None:
        """Send an arbitrary structured payload."""
        ...

    def on(self, event: Event | str, listener: Listener) -> None:
        """Register a listener."""
        ...

    def off(self, event: Event | str, listener: Listener) -> None:
        """Remove a listener."""
        ...


class AgentSession:
    """Realtime session with a Ragwalla agent."""

    def __init__(
        self,
        config: WebSocketConfig,
        transport_factory: TransportFactory | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._config = config
        self._endpoint = to_websocket_url(config.base_url)
        self._transport_factory = transport_factory or WebSocketTransport.open

        self._dispatcher = EventDispatcher()
        self._supervisor = ReconnectionSupervisor(
            max_attempts=config.reconnect_attempts,
            base_delay=config.reconnect_delay,
            sleep=sleep,
        )
        self._continuation = ContinuationController(config.continuation_mode)

        self._state = SessionState.IDLE
        self._identity: SessionIdentity | None = None
        self._transport: ITransport | None = None
        self._reader_task: asyncio.Task | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._closed_by_caller = False
        self._generation = 0
        self._thread_id: str | None = None
        self._log = bind_context(logger)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.OPEN and self._transport is not None

    @property
    def closed_by_caller(self) -> bool:
        """True once disconnect() was called and no connect() followed."""
        return self._closed_by_caller

    @property
    def identity(self) -> SessionIdentity | None:
        return self._identity

    @property
    def continuation_mode(self) -> ContinuationMode:
        return self._continuation.mode

    @property
    def thread_id(self) -> str | None:
        """Thread announced by the most recent ``thread_info``."""
        return self._thread_id

    @property
    def reconnect_attempts(self) -> int:
        return self._supervisor.attempts

    @property
    def endpoint(self) -> str:
        return self._endpoint

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on(self, event: Event | str, listener: Listener) -> None:
        """Register a listener."""
        self._dispatcher.subscribe(event, listener)

    def off(self, event: Event | str, listener: Listener) -> None:
        """Remove a listener."""
        self._dispatcher.unsubscribe(event, listener)

    def remove_all_listeners(self, event: Event | str | None = None) -> None:
        """Remove all listeners of one event, or of every event."""
        self._dispatcher.unsubscribe_all(event)

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def build_url(self, identity: SessionIdentity) -> str:
        """Channel URL for an identity and the current continuation mode."""
        query = {
            "token": identity.token,
            "continuation_mode": self._continuation.mode,
        }
        if identity.thread_id:
            query["thread_id"] = identity.thread_id

        agent = quote(identity.agent_id, safe="")
        tag = quote(identity.session_tag, safe="")
        return f"{self._endpoint}/agents/{agent}/{tag}?{urlencode(query)}"

    async def connect(
        self,
        agent_id: str,
        session_tag: str,
        token: str,
        thread_id: str | None = None,
    ) -> None:
        """Open the channel. Resolves once the transport is open.

        Raises:
            ConfigurationError: a required parameter is empty.
            ConnectionFailedError: the handshake failed.
        """
        if not agent_id:
            raise ConfigurationError("agent_id is required")
        if not session_tag:
            raise ConfigurationError("session_tag is required")
        if not token:
            raise ConfigurationError("token is required")

        self._generation += 1
        previous = self._detach()
        await self._cancel_reconnect()
        if previous is not None:
            await self._close_quietly(previous)

        self._identity = SessionIdentity(agent_id, session_tag, token, thread_id)
        self._log = bind_context(logger, agent_id=agent_id, session_tag=session_tag)
        await self._open()

    async def disconnect(self) -> None:
        """Close the channel. No automatic reconnection follows."""
        self._closed_by_caller = True
        self._generation += 1
        transport = self._detach()
        await self._cancel_reconnect()

        if transport is None:
            if self._state is not SessionState.IDLE:
                self._state = SessionState.CLOSED
            return

        self._state = SessionState.CLOSING
        await self._close_quietly(transport)
        self._state = SessionState.CLOSED
        self._log.info("Disconnected by caller")

    async def __aenter__(self) -> "AgentSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()

    async def _open(self) -> None:
        """Run one handshake with the stored identity."""
        identity = self._identity
        generation = self._generation
        self._state = SessionState.CONNECTING
        self._trace(
            "Connecting to %s/agents/%s/%s",
            self._endpoint,
            identity.agent_id,
            identity.session_tag,
        )

        try:
            transport = await self._transport_factory(self.build_url(identity))
        except asyncio.CancelledError:
            if generation == self._generation:
                self._state = SessionState.CLOSED
            raise
        except Exception as e:
            if generation != self._generation:
                # disconnect() or another connect() owns the session now
                raise ConnectionFailedError(
                    "Connection superseded during handshake"
                ) from e
            self._state = SessionState.CLOSED
            detail = str(e) or type(e).__name__
            self._log.warning("Connection failed: %s", detail)
            self._dispatcher.dispatch(Event.ERROR, ErrorMessage(error=detail))
            raise ConnectionFailedError(detail) from e

        if generation != self._generation:
            # disconnect() or another connect() ran during the handshake
            await self._close_quietly(transport)
            raise ConnectionFailedError("Connection superseded during handshake")

        self._transport = transport
        self._state = SessionState.OPEN
        self._closed_by_caller = False
        self._supervisor.reset()
        self._reader_task = asyncio.create_task(self._receive_loop(transport))
        self._log.info("Connected")
        self._dispatcher.dispatch(Event.CONNECTED, {})

    async def _receive_loop(self, transport: ITransport) -> None:
        try:
            while True:
                frame = await transport.recv()
                if transport is not self._transport:
                    return
                self._handle_frame(frame)
        except TransportClosed as e:
            if transport is self._transport:
                self._handle_closed(e.code, e.reason)
        except Exception as e:
            if transport is not self._transport:
                return
            self._log.exception("Transport failure")
            self._dispatcher.dispatch(
                Event.ERROR, ErrorMessage(error=str(e) or type(e).__name__)
            )
            self._handle_closed(ABNORMAL_CLOSURE, str(e))
            await self._close_quietly(transport)

    def _handle_closed(self, code: int, reason: str) -> None:
        """Transport closed without a preceding disconnect()."""
        self._transport = None
        self._reader_task = None
        self._state = SessionState.CLOSED
        self._log.info("Connection closed (%s): %s", code, reason)
        self._dispatcher.dispatch(Event.DISCONNECTED, DisconnectInfo(code, reason))

        if self._closed_by_caller or not self._supervisor.can_retry:
            return
        self._reconnect_task = asyncio.create_task(self._reconnect())

    async def _reconnect(self) -> None:
        succeeded = await self._supervisor.run(self._open)

        if self._reconnect_task is asyncio.current_task():
            self._reconnect_task = None

        if not succeeded and not self._closed_by_caller:
            attempts = self._supervisor.attempts
            self._log.error("Reconnection failed after %s attempts", attempts)
            self._dispatcher.dispatch(
                Event.RECONNECT_FAILED, ReconnectFailed(attempts=attempts)
            )

    def _detach(self) -> ITransport | None:
        """Unbind the current transport so its signals are ignored."""
        transport, self._transport = self._transport, None
        reader, self._reader_task = self._reader_task, None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
        return transport

    async def _cancel_reconnect(self) -> None:
        task, self._reconnect_task = self._reconnect_task, None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _close_quietly(self, transport: ITransport) -> None:
        try:
            await transport.close()
        except Exception as e:
            self._log.debug("Error while closing transport: %s", e)

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def _handle_frame(self, frame: str | bytes) -> None:
        message = decode(frame)
        if isinstance(message, DecodeError):
            self._log.warning("Failed to parse message: %s", message.reason)
            self._dispatcher.dispatch(
                Event.ERROR,
                ErrorMessage(error="Failed to parse message", data=message.raw),
            )
            return

        self._trace("Received %s", type(message).__name__)
        self._route(message)

    def _route(self, message: WireMessage) -> None:
        if isinstance(message, ContentChunk):
            self._dispatcher.dispatch(Event.CHUNK, message)
            self._dispatcher.dispatch(
                Event.MESSAGE,
                ConversationMessage(
                    content=message.content,
                    role="assistant",
                    thread_id=message.thread_id,
                    message_id=message.message_id,
                    raw=message.raw,
                ),
            )
            return

        if isinstance(message, UnrecognizedMessage):
            self._dispatcher.dispatch(Event.RAW_MESSAGE, message.envelope)
            return

        if isinstance(message, ThreadInfo) and message.thread_id:
            self._thread_id = message.thread_id
        elif isinstance(message, ContinuationModeUpdated):
            self._continuation.apply_ack(message)

        self._dispatcher.dispatch(_EVENTS[type(message)], message)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send_message(self, message: ChatMessage | dict) -> None:
        """Send a conversational message.

        Raises:
            NotConnectedError: the session is not open.
            PreconditionError: a dict message has an invalid shape.
        """
        transport = self._require_open()
        if isinstance(message, dict):
            message = ChatMessage.from_dict(message)
        await self._write(transport, encode_chat_message(message))

    async def send(self, payload: dict) -> None:
        """Send an arbitrary structured payload.

        Raises:
            NotConnectedError: the session is not open.
        """
        transport = self._require_open()
        await self._write(transport, encode(payload))

    async def set_continuation_mode(self, mode: ContinuationMode) -> None:
        """Switch continuation mode; notifies the server only while open."""
        self._continuation.set_mode(mode)
        if self.is_connected:
            await self.send(self._continuation.mode_message())

    async def continue_run(self, run_id: str) -> None:
        """Ask the server to resume a paused run.

        Raises:
            PreconditionError: ``run_id`` is empty.
            NotConnectedError: the session is not open.
        """
        await self.send(self._continuation.continue_message(run_id))

    def _require_open(self) -> ITransport:
        if not self.is_connected:
            raise NotConnectedError()
        return self._transport

    async def _write(self, transport: ITransport, data: str) -> None:
        self._trace("Sending %s", data[:200])
        try:
            await transport.send(data)
        except TransportClosed as e:
            raise NotConnectedError() from e

    def _trace(self, msg: str, *args: Any) -> None:
        level = logging.INFO if self._config.debug else logging.DEBUG
        self._log.log(level, msg, *args)
