"""EventBus module."""

from .event_bus import EventDispatcher, IEventDispatcher, Listener

__all__ = ["EventDispatcher", "IEventDispatcher", "Listener"]
