"""OpenTelemetry OTLP exporter setup."""

from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
    OTLPSpanExporter,
)

from mailticks.config import OtelConfig


def setup_otel_exporter(otel: OtelConfig) -> OTLPSpanExporter:
    """Create the OTLP gRPC exporter spans of instrumented sends go to.

    The connection is only secured when the endpoint is given as an
    ``https://`` URL, a bare ``host:port`` is treated as a plaintext
    collector.

    Args:
        otel: The OpenTelemetry section of the config

    Returns:
        Configured OTLPSpanExporter instance
    """
    return OTLPSpanExporter(
        endpoint=otel.endpoint,
        insecure=not otel.endpoint.startswith("https://"),
        headers=otel.headers or None,
        timeout=otel.timeout,
    )
