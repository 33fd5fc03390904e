"""Tracing controllers used to bracket instrumented sends with spans."""

from mailticks.tracing.base import TracingController
from mailticks.tracing.otel import (
    OtelTracingController,
    create_tracer,
    setup_otel_exporter,
)

__all__ = [
    "TracingController",
    "OtelTracingController",
    "create_tracer",
    "setup_otel_exporter",
]
