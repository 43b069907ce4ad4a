"""Synchronous, priority-ordered event dispatching."""

from theme_kernel.events.dispatcher import (
    DEFAULT_PRIORITY,
    EventDispatcher,
    ListenerEntry,
    ListenerFailure,
    ignore_event,
)
from theme_kernel.events.event import Event

__all__ = [
    "DEFAULT_PRIORITY",
    "Event",
    "EventDispatcher",
    "ListenerEntry",
    "ListenerFailure",
    "ignore_event",
]
