"""Event logger attaching telemetry events to OpenTelemetry spans."""

import logging
import time
from typing import Any

from opentelemetry import trace

from mailticks.events.base import Event, EventLogger
from mailticks.exceptions import EventError

logger = logging.getLogger("mailticks")


class SpanEvent(Event):
    """Event added to the current span when recorded.

    Tags become ``tag.<name>`` attributes and fields ``field.<name>``
    attributes. Trace and span ids are kept as attributes too, since the
    span the event ends up on may not be the one the ids were taken from.
    """

    def __init__(self, kind: str):
        self.kind = kind
        self.attributes: dict[str, Any] = {}
        self.timestamp: int | None = None
        self.recorded = False

    def set_trace_id(self, trace_id: str) -> None:
        self.attributes["traceId"] = trace_id

    def set_span_id(self, span_id: str) -> None:
        self.attributes["spanId"] = span_id

    def set_parent_span_id(self, parent_span_id: str) -> None:
        self.attributes["parentSpanId"] = parent_span_id

    def add_tags(self, tags: dict[str, str]) -> None:
        for name, value in tags.items():
            self.attributes[f"tag.{name}"] = value

    def add_fields(self, fields: dict[str, Any]) -> None:
        for name, value in fields.items():
            self.attributes[f"field.{name}"] = value

    def record_timestamp(self) -> None:
        self.timestamp = time.time_ns()

    def record(self) -> None:
        if self.recorded:
            raise EventError(f"Event {self.kind} has already been recorded")
        span = trace.get_current_span()
        if not span.is_recording():
            logger.debug(f"No recording span for event {self.kind}")
        attributes = {
            name: value
            for name, value in self.attributes.items()
            if value is not None
        }
        span.add_event(
            self.kind, attributes=attributes, timestamp=self.timestamp
        )
        self.recorded = True


class SpanEventLogger(EventLogger):
    """Record events on whichever span is current at record time."""

    def new_event(self, kind: str) -> SpanEvent:
        return SpanEvent(kind)
