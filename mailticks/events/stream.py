"""Event logger writing telemetry events as JSON log lines."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from mailticks.events.base import Event, EventLogger
from mailticks.exceptions import EventError


class LoggedEvent(Event):
    """Event buffered in memory and written to a logger on record."""

    def __init__(self, kind: str, logger: logging.Logger):
        self.kind = kind
        self.logger = logger
        self.timestamp: str | None = None
        self.trace_id: str | None = None
        self.span_id: str | None = None
        self.parent_span_id: str | None = None
        self.tags: dict[str, str] = {}
        self.fields: dict[str, Any] = {}
        self.recorded = False

    def set_trace_id(self, trace_id: str) -> None:
        self.trace_id = trace_id

    def set_span_id(self, span_id: str) -> None:
        self.span_id = span_id

    def set_parent_span_id(self, parent_span_id: str) -> None:
        self.parent_span_id = parent_span_id

    def add_tags(self, tags: dict[str, str]) -> None:
        self.tags.update(tags)

    def add_fields(self, fields: dict[str, Any]) -> None:
        self.fields.update(fields)

    def record_timestamp(self) -> None:
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "event": self.kind,
            "timestamp": self.timestamp,
            "traceId": self.trace_id,
            "spanId": self.span_id,
            "parentSpanId": self.parent_span_id,
            "tags": self.tags,
            "fields": self.fields,
        }
        return {key: value for key, value in data.items() if value is not None}

    def record(self) -> None:
        if self.recorded:
            raise EventError(f"Event {self.kind} has already been recorded")
        self.logger.info(
            json.dumps(self.to_dict(), separators=(",", ":"), default=str)
        )
        self.recorded = True


class LoggingEventLogger(EventLogger):
    """Write every recorded event as one JSON line.

    Events go to the ``mailticks.events`` logger unless another logger is
    given, so they can be routed to their own handler.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("mailticks.events")

    def new_event(self, kind: str) -> LoggedEvent:
        return LoggedEvent(kind, self.logger)
