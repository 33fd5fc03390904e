"""OpenTelemetry tracer creation and provider setup."""

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from mailticks import __version__


def create_tracer(
    service_name: str, exporter: SpanExporter | None = None
) -> tuple[trace.Tracer, TracerProvider]:
    """Create a tracer for the instrumented mail sender.

    Args:
        service_name: Value of the ``service.name`` resource attribute
        exporter: Where finished spans go. Without one spans are recorded
            but never exported.

    Returns:
        Tuple of (tracer, provider)
    """
    resource = Resource(
        attributes={
            "service.name": service_name,
            "service.version": __version__,
        }
    )
    provider = TracerProvider(resource=resource)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    return provider.get_tracer("mailticks"), provider
