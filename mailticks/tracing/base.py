"""Base class for tracing controllers.

A tracing controller owns the span lifecycle around an instrumented call and
exposes the identity of the current span so that telemetry events can be
linked to the trace they belong to.
"""

from abc import ABC, abstractmethod


class TracingController(ABC):
    """Abstract interface to a tracing backend."""

    @abstractmethod
    def start_child_span(self) -> None:
        """Start a span as a child of the current one and make it current."""

    @abstractmethod
    def stop_child_span(self) -> None:
        """Stop the span started by the last ``start_child_span`` call."""

    @abstractmethod
    def get_trace_id(self) -> str | None:
        """Return the id of the current trace, if there is one."""

    @abstractmethod
    def get_span_id(self) -> str | None:
        """Return the id of the current span, if there is one."""

    @abstractmethod
    def get_parent_span_id(self) -> str | None:
        """Return the id of the parent of the current span, if any."""

    @abstractmethod
    def get_span_specific_tags(self) -> dict[str, str]:
        """Return the tags attached to the current span."""
