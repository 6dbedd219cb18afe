"""Event dispatcher for session events."""

import asyncio
import inspect
from typing import Any, Callable, Protocol

from ..logging_config import get_logger
from ..models import Event

logger = get_logger(__name__)


Listener = Callable[[Any], Any]


class IEventDispatcher(Protocol):
    """Publish/subscribe registry keyed by event name."""

    def subscribe(self, event: Event | str, listener: Listener) -> None:
        """Subscribe a listener to an event."""
        ...

    def unsubscribe(self, event: Event | str, listener: Listener) -> None:
        """Remove one listener from an event."""
        ...

    def unsubscribe_all(self, event: Event | str | None = None) -> None:
        """Clear listeners of one event, or of every event."""
        ...

    def dispatch(self, event: Event | str, payload: Any) -> None:
        """Invoke every listener of an event with the payload."""
        ...


def _key(event: Event | str) -> str:
    return event.value if isinstance(event, Event) else event


class EventDispatcher:
    """In-memory event dispatcher.

    Listeners of one event form an ordered set: subscribing the same callable
    twice has no effect. A failing listener is logged and skipped. Coroutine
    listeners are scheduled on the running loop.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, dict[Listener, None]] = {}
        self._pending: set[asyncio.Task] = set()

    def subscribe(self, event: Event | str, listener: Listener) -> None:
        """Subscribe a listener to an event."""
        self._listeners.setdefault(_key(event), {})[listener] = None

    def unsubscribe(self, event: Event | str, listener: Listener) -> None:
        """Remove one listener from an event."""
        listeners = self._listeners.get(_key(event))
        if listeners is not None:
            listeners.pop(listener, None)

    def unsubscribe_all(self, event: Event | str | None = None) -> None:
        """Clear listeners of one event, or of every event."""
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(_key(event), None)

    def listener_count(self, event: Event | str) -> int:
        """Number of listeners subscribed to an event."""
        return len(self._listeners.get(_key(event), {}))

    def dispatch(self, event: Event | str, payload: Any) -> None:
        """Invoke every listener of an event with the payload."""
        name = _key(event)
        for listener in list(self._listeners.get(name, {})):
            try:
                result = listener(payload)
                if inspect.isawaitable(result):
                    self._schedule(name, result)
            except Exception:
                logger.exception("Error in listener for event %s", name)

    def _schedule(self, name: str, awaitable: Any) -> None:
        try:
            task = asyncio.ensure_future(awaitable, loop=asyncio.get_running_loop())
        except RuntimeError:
            # no running loop
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise
        self._pending.add(task)
        task.add_done_callback(lambda t: self._on_listener_done(name, t))

    def _on_listener_done(self, name: str, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Error in async listener for event %s: %s",
                name,
                error,
                exc_info=error,
            )

    async def drain(self) -> None:
        """Wait for scheduled coroutine listeners to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
