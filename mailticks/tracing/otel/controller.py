"""Tracing controller backed by OpenTelemetry."""

import logging
from dataclasses import dataclass

from opentelemetry import context, trace
from opentelemetry.trace import SpanContext

from mailticks.tracing.base import TracingController

logger = logging.getLogger("mailticks")


@dataclass
class OpenSpan:
    span: trace.Span
    token: object
    parent: SpanContext | None


class OtelTracingController(TracingController):
    """Start and stop OpenTelemetry spans around instrumented calls.

    Spans are started as children of whatever span is current when
    ``start_child_span`` is called and attached to the context until
    ``stop_child_span``. Ids are returned hex encoded, the way OTLP
    backends display them.
    """

    def __init__(
        self,
        tracer: trace.Tracer,
        span_name: str = "mail.send",
        tags: dict[str, str] | None = None,
    ):
        """Initialize the controller.

        Args:
            tracer: The tracer to create spans with
            span_name: Name given to every span started by the controller
            tags: Static tags attached to every span and reported as span
                specific tags
        """
        self.tracer = tracer
        self.span_name = span_name
        self.tags = dict(tags or {})
        self._open_spans: list[OpenSpan] = []

    def start_child_span(self) -> None:
        parent = trace.get_current_span().get_span_context()
        span = self.tracer.start_span(
            name=self.span_name,
            kind=trace.SpanKind.CLIENT,
            attributes=self.tags or None,
        )
        token = context.attach(trace.set_span_in_context(span))
        self._open_spans.append(
            OpenSpan(span, token, parent if parent.is_valid else None)
        )
        logger.debug(f"Started span {self.span_name}")

    def stop_child_span(self) -> None:
        if not self._open_spans:
            logger.warning("stop_child_span called without an open span")
            return
        open_span = self._open_spans.pop()
        context.detach(open_span.token)
        open_span.span.end()
        logger.debug(f"Stopped span {self.span_name}")

    def get_trace_id(self) -> str | None:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return None
        return trace.format_trace_id(span_context.trace_id)

    def get_span_id(self) -> str | None:
        span_context = trace.get_current_span().get_span_context()
        if not span_context.is_valid:
            return None
        return trace.format_span_id(span_context.span_id)

    def get_parent_span_id(self) -> str | None:
        current = trace.get_current_span()
        if self._open_spans and self._open_spans[-1].span is current:
            parent = self._open_spans[-1].parent
        else:
            # SDK spans know their parent, API spans don't
            parent = getattr(current, "parent", None)
        if parent is None or not parent.is_valid:
            return None
        return trace.format_span_id(parent.span_id)

    def get_span_specific_tags(self) -> dict[str, str]:
        return dict(self.tags)
