"""Construction of an instrumented mail sender from the configuration."""

import logging

from opentelemetry.sdk.trace import TracerProvider

from mailticks.config import Config, EventSink
from mailticks.events import EventLogger, LoggingEventLogger, SpanEventLogger
from mailticks.instrumentor import SendInstrumentor
from mailticks.mailer import SMTPMailer
from mailticks.tracing import (
    OtelTracingController,
    create_tracer,
    setup_otel_exporter,
)

logger = logging.getLogger("mailticks")


def build_mailer(config: Config) -> SMTPMailer:
    """Create an SMTP sender with the configured transport settings."""
    smtp = config.smtp
    mailer = SMTPMailer(
        host=smtp.host,
        port=smtp.port,
        helo=smtp.helo,
        secure=smtp.secure,
        auto_tls=smtp.auto_tls,
        auth=smtp.auth,
        username=smtp.username,
        password=smtp.password,
        keep_alive=smtp.keep_alive,
        auth_type=smtp.auth_type,
        timeout=smtp.timeout,
        options=smtp.options,
        encoding=smtp.encoding,
    )
    mailer.from_address = config.from_address
    mailer.from_name = config.from_name
    return mailer


def build_event_logger(config: Config) -> EventLogger:
    if config.event_sink == EventSink.SPAN:
        return SpanEventLogger()
    return LoggingEventLogger()


def build_tracing(
    config: Config,
) -> tuple[OtelTracingController, TracerProvider]:
    """Create the tracing controller and the provider backing it.

    The caller owns the provider and should shut it down to flush spans.
    """
    exporter = None
    if config.otel.endpoint:
        logger.info(f"Exporting spans to {config.otel.endpoint}")
        exporter = setup_otel_exporter(config.otel)
    tracer, provider = create_tracer(config.otel.service_name, exporter)
    controller = OtelTracingController(tracer, tags=config.otel.tags)
    return controller, provider


def build_instrumentor(
    config: Config,
) -> tuple[SendInstrumentor, TracerProvider]:
    """Wire a sender, event logger and tracing controller together."""
    controller, provider = build_tracing(config)
    instrumentor = SendInstrumentor(
        build_mailer(config),
        build_event_logger(config),
        controller,
        config.detail_level,
    )
    return instrumentor, provider
