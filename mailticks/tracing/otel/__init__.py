"""OpenTelemetry integration for instrumented mail sending.

Submodules:
- exporter: OTLP exporter setup
- tracer: Tracer provider creation
- controller: Tracing controller on top of an OpenTelemetry tracer
"""

from mailticks.tracing.otel.controller import OtelTracingController
from mailticks.tracing.otel.exporter import setup_otel_exporter
from mailticks.tracing.otel.tracer import create_tracer

__all__ = [
    "setup_otel_exporter",
    "create_tracer",
    "OtelTracingController",
]
