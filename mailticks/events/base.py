"""Base classes for telemetry event logging.

An event logger hands out events of a given kind. The caller fills in the
trace linkage, tags and fields of an event and finally records it, which
commits it to whatever backend the logger writes to.
"""

from abc import ABC, abstractmethod
from typing import Any


class Event(ABC):
    """A single structured telemetry record."""

    @abstractmethod
    def set_trace_id(self, trace_id: str) -> None:
        """Link the event to a trace."""

    @abstractmethod
    def set_span_id(self, span_id: str) -> None:
        """Link the event to a span."""

    @abstractmethod
    def set_parent_span_id(self, parent_span_id: str) -> None:
        """Link the event to the parent of its span."""

    @abstractmethod
    def add_tags(self, tags: dict[str, str]) -> None:
        """Add indexed string tags, overwriting existing ones."""

    @abstractmethod
    def add_fields(self, fields: dict[str, Any]) -> None:
        """Add payload fields, overwriting existing ones."""

    @abstractmethod
    def record_timestamp(self) -> None:
        """Set the event timestamp to now."""

    @abstractmethod
    def record(self) -> None:
        """Commit the event."""


class EventLogger(ABC):
    """Factory for telemetry events."""

    @abstractmethod
    def new_event(self, kind: str) -> Event:
        """Create a new, empty event of the given kind."""
