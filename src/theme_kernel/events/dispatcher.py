"""Synchronous, priority-ordered event dispatcher.

Listeners are registered per event name with an integer priority (default
10, higher runs first). Equal priorities run in registration order. A
dispatch creates a fresh :class:`Event`, runs the listeners on the calling
thread and returns the event once every listener ran or one of them stopped
propagation.

Failure policy:
- By default a listener exception propagates to the ``dispatch`` caller and
  the remaining listeners for that dispatch do not run.
- With an ``on_listener_error`` callback the exception is logged, recorded
  as a :class:`ListenerFailure` and dispatch continues with the next
  listener.

One-shot listeners are deregistered before they are invoked, so they run at
most once even when they raise.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .event import Event

logger = logging.getLogger(__name__)

Listener = Callable[[Event], Any]
ListenerErrorCallback = Callable[[str, Listener, Exception], None]

DEFAULT_PRIORITY = 10

# Recorded failures kept for introspection; oldest are dropped first.
MAX_RECORDED_FAILURES = 100


@dataclass
class ListenerEntry:
    """One registration of a callback for an event name."""

    callback: Listener
    priority: int = DEFAULT_PRIORITY
    once: bool = False


@dataclass
class ListenerFailure:
    """Record of a listener that raised while error capture was enabled."""

    event_name: str
    listener: str
    error: str
    timestamp: float = field(default_factory=time.monotonic)


def ignore_event(func: Callable[[], Any]) -> Listener:
    """Adapt a zero-argument callable into a listener.

    Keep the returned wrapper if you need to :meth:`EventDispatcher.off` it
    later; removal matches the registered object, not *func*.
    """

    def listener(event: Event) -> Any:
        return func()

    listener.__name__ = getattr(func, "__name__", "listener")
    listener.__qualname__ = getattr(func, "__qualname__", listener.__name__)
    listener.__wrapped__ = func  # type: ignore[attr-defined]
    return listener


class EventDispatcher:
    """Registry of per-event-name listeners with synchronous dispatch.

    The registry is guarded by a single re-entrant lock. Listener callbacks
    run outside the lock, so a listener may itself register or remove
    listeners; such changes apply from the next dispatch on.
    """

    def __init__(
        self,
        on_listener_error: ListenerErrorCallback | None = None,
    ) -> None:
        # event name -> entries, kept sorted by descending priority
        self._listeners: dict[str, list[ListenerEntry]] = defaultdict(list)
        self._lock = threading.RLock()
        self._on_listener_error = on_listener_error
        self._failures: list[ListenerFailure] = []

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(
        self,
        event_name: str,
        callback: Listener,
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register *callback* for every dispatch of *event_name*."""
        self._add(event_name, ListenerEntry(callback, priority, once=False))

    def once(
        self,
        event_name: str,
        callback: Listener,
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register *callback* for the next dispatch of *event_name* only."""
        self._add(event_name, ListenerEntry(callback, priority, once=True))

    def off(self, event_name: str, callback: Listener) -> bool:
        """Remove the first registration of *callback* (identity match).

        Returns True if an entry was removed.
        """
        with self._lock:
            entries = self._listeners.get(event_name)
            if not entries:
                return False
            for index, entry in enumerate(entries):
                if entry.callback is callback:
                    del entries[index]
                    if not entries:
                        del self._listeners[event_name]
                    return True
        return False

    def remove_all_listeners(self, event_name: str | None = None) -> None:
        """Clear listeners for *event_name*, or the whole registry when None."""
        with self._lock:
            if event_name is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event_name, None)

    def _add(self, event_name: str, entry: ListenerEntry) -> None:
        if not isinstance(event_name, str) or not event_name:
            raise ValueError("event_name must be a non-empty string.")
        with self._lock:
            entries = self._listeners[event_name]
            entries.append(entry)
            # list.sort is stable: equal priorities keep registration order
            entries.sort(key=lambda e: e.priority, reverse=True)
        logger.debug(
            "Listener registered event=%s priority=%d once=%s",
            event_name,
            entry.priority,
            entry.once,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_listeners(self, event_name: str) -> bool:
        with self._lock:
            return bool(self._listeners.get(event_name))

    def get_listeners(self, event_name: str) -> list[Listener]:
        """Callbacks for *event_name* in dispatch order."""
        with self._lock:
            return [entry.callback for entry in self._listeners.get(event_name, [])]

    def count_listeners(self, event_name: str | None = None) -> int:
        with self._lock:
            if event_name is None:
                return sum(len(entries) for entries in self._listeners.values())
            return len(self._listeners.get(event_name, []))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def dispatch(
        self,
        event_name: str,
        initial_data: Mapping[str, Any] | None = None,
    ) -> Event:
        """Run the listeners of *event_name* and return the resulting event."""
        event = Event(event_name, initial_data)

        with self._lock:
            snapshot = list(self._listeners.get(event_name, []))

        for entry in snapshot:
            if entry.once and not self._discard(event_name, entry):
                # Already consumed or removed since the snapshot was taken.
                continue

            self._invoke(event, entry.callback)

            if event.is_propagation_stopped():
                logger.debug("Propagation stopped event=%s", event_name)
                break

        return event

    def _discard(self, event_name: str, target: ListenerEntry) -> bool:
        """Remove exactly *target* from the registry. Returns True if found."""
        with self._lock:
            entries = self._listeners.get(event_name)
            if not entries:
                return False
            for index, entry in enumerate(entries):
                if entry is target:
                    del entries[index]
                    if not entries:
                        del self._listeners[event_name]
                    return True
        return False

    def _invoke(self, event: Event, callback: Listener) -> None:
        if self._on_listener_error is None:
            callback(event)
            return

        try:
            callback(event)
        except Exception as exc:
            self._record_failure(event.name, callback, exc)
            logger.exception(
                "Listener error on event=%s listener=%s",
                event.name,
                _describe(callback),
            )
            try:
                self._on_listener_error(event.name, callback, exc)
            except Exception:
                logger.warning("on_listener_error callback failed", exc_info=True)

    def _record_failure(self, event_name: str, callback: Listener, exc: Exception) -> None:
        with self._lock:
            self._failures.append(
                ListenerFailure(
                    event_name=event_name,
                    listener=_describe(callback),
                    error=str(exc),
                )
            )
            if len(self._failures) > MAX_RECORDED_FAILURES:
                del self._failures[: len(self._failures) - MAX_RECORDED_FAILURES]

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def failures(self) -> list[ListenerFailure]:
        """Snapshot of recorded listener failures."""
        with self._lock:
            return list(self._failures)

    def clear_failures(self) -> list[ListenerFailure]:
        """Drain the recorded failures and return them."""
        with self._lock:
            drained = self._failures[:]
            self._failures.clear()
        return drained


def _describe(callback: Listener) -> str:
    return getattr(callback, "__qualname__", None) or repr(callback)
