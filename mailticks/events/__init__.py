"""Telemetry event loggers."""

from .base import Event, EventLogger
from .otel import SpanEvent, SpanEventLogger
from .stream import LoggedEvent, LoggingEventLogger

__all__ = [
    "Event",
    "EventLogger",
    "LoggedEvent",
    "LoggingEventLogger",
    "SpanEvent",
    "SpanEventLogger",
]
