"""Event payload object passed to dispatcher listeners.

An event has a fixed name and a mutable payload. Listeners read and write
payload keys by convention per event name, and may halt the rest of the
dispatch with :meth:`Event.stop_propagation`. All mutators return the same
instance so calls can be chained.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class Event:
    """A named, mutable payload with a one-way propagation-stop flag."""

    __slots__ = ("_name", "_data", "_propagation_stopped")

    def __init__(self, name: str, data: Mapping[str, Any] | None = None) -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("Event name must be a non-empty string.")
        self._name = name
        self._data: dict[str, Any] = dict(data) if data else {}
        self._propagation_stopped = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def data(self) -> dict[str, Any]:
        """The live payload mapping."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> Event:
        self._data[key] = value
        return self

    def has(self, key: str) -> bool:
        return key in self._data

    def remove(self, key: str) -> Event:
        self._data.pop(key, None)
        return self

    def merge(self, data: Mapping[str, Any]) -> Event:
        """Merge *data* into the payload; incoming values win on collision."""
        self._data.update(data)
        return self

    def stop_propagation(self) -> Event:
        self._propagation_stopped = True
        return self

    def is_propagation_stopped(self) -> bool:
        return self._propagation_stopped

    def __repr__(self) -> str:
        return (
            f"Event(name={self._name!r}, keys={sorted(self._data)!r}, "
            f"stopped={self._propagation_stopped})"
        )
