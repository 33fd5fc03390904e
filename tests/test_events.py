"""Tests for the event loggers and their integration with a real send."""

import json
from unittest.mock import MagicMock, patch

import pytest
from opentelemetry import trace

from mailticks.events import LoggingEventLogger, SpanEventLogger
from mailticks.exceptions import EventError
from mailticks.instrumentor import SendInstrumentor
from mailticks.mailer import SMTPMailer
from mailticks.tracing.otel import OtelTracingController


@pytest.fixture
def log():
    return MagicMock()


def fill(event):
    event.set_trace_id("bc5bfcc78d8d4e59b4be7453b97410d0")
    event.set_span_id("ef14c1845b4a4e0b")
    event.add_tags({"type": "SMTP", "status": "200"})
    event.add_fields({"url": "localhost", "options": None})
    event.record_timestamp()


class TestLoggingEventLogger:
    def test_record_writes_one_json_line(self, log):
        event = LoggingEventLogger(log).new_event("outbound_requests_log")
        fill(event)

        event.record()

        log.info.assert_called_once()
        data = json.loads(log.info.call_args.args[0])
        assert data["event"] == "outbound_requests_log"
        assert data["traceId"] == "bc5bfcc78d8d4e59b4be7453b97410d0"
        assert data["spanId"] == "ef14c1845b4a4e0b"
        assert data["tags"] == {"type": "SMTP", "status": "200"}
        assert data["fields"] == {"url": "localhost", "options": None}
        assert "timestamp" in data

    def test_unset_parent_is_omitted(self, log):
        event = LoggingEventLogger(log).new_event("outbound_requests_log")
        fill(event)

        event.record()

        data = json.loads(log.info.call_args.args[0])
        assert "parentSpanId" not in data

    def test_record_twice(self, log):
        event = LoggingEventLogger(log).new_event("outbound_requests_log")
        event.record()

        with pytest.raises(EventError, match="already been recorded"):
            event.record()

        log.info.assert_called_once()

    def test_default_logger(self):
        assert LoggingEventLogger().logger.name == "mailticks.events"


class TestSpanEventLogger:
    def test_event_is_added_to_current_span(self, tracer, span_exporter):
        """Tags and fields become prefixed span event attributes."""
        with tracer.start_as_current_span("mail.send"):
            event = SpanEventLogger().new_event("outbound_requests_log")
            fill(event)
            event.record()

        (span,) = span_exporter.get_finished_spans()
        (span_event,) = span.events
        assert span_event.name == "outbound_requests_log"
        assert dict(span_event.attributes) == {
            "traceId": "bc5bfcc78d8d4e59b4be7453b97410d0",
            "spanId": "ef14c1845b4a4e0b",
            "tag.type": "SMTP",
            "tag.status": "200",
            "field.url": "localhost",
        }
        assert span_event.timestamp == event.timestamp

    def test_record_twice(self, tracer):
        with tracer.start_as_current_span("mail.send"):
            event = SpanEventLogger().new_event("outbound_requests_log")
            event.record()

            with pytest.raises(EventError):
                event.record()


class TestInstrumentedSmtpSend:
    """A send through smtplib, OpenTelemetry and the event log together."""

    @pytest.fixture
    def sender(self):
        mailer = SMTPMailer(host="smtp://smtp.example.com:25")
        mailer.from_address = "noreply@example.com"
        mailer.subject = "Your invoice"
        mailer.body = "Hi"
        mailer.add_address("jane@example.com")
        mailer.add_address("john@example.com")
        return mailer

    @pytest.fixture(autouse=True)
    def smtp(self):
        with patch("mailticks.mailer.smtp.smtplib.SMTP") as smtp_class:
            session = smtp_class.return_value
            session.has_extn.return_value = False
            session.mail.return_value = (250, b"2.1.0 Ok")
            session.rcpt.return_value = (250, b"2.1.5 Ok")
            session.data.return_value = (
                250,
                b"2.0.0 Ok: queued as 4F2B51C0A1",
            )
            yield session

    def test_events_are_linked_to_the_send_span(
        self, sender, tracer, span_exporter, log
    ):
        instrumentor = SendInstrumentor(
            sender,
            LoggingEventLogger(log),
            OtelTracingController(tracer),
        )

        assert instrumentor.send() is True

        (span,) = span_exporter.get_finished_spans()
        events = [json.loads(c.args[0]) for c in log.info.call_args_list]
        assert len(events) == 2
        for event in events:
            assert event["traceId"] == trace.format_trace_id(
                span.context.trace_id
            )
            assert event["spanId"] == trace.format_span_id(
                span.context.span_id
            )
            assert event["tags"] == {
                "type": "SMTP",
                "status": "200",
                "domain": "smtp.example.com",
            }
            assert event["fields"]["url"] == "smtp://smtp.example.com"

    def test_refused_recipient(
        self, sender, smtp, tracer, span_exporter, log
    ):
        """A refused address is reported by the sender and the failure."""
        smtp.rcpt.side_effect = [
            (250, b"2.1.5 Ok"),
            (550, b"5.1.1 User unknown"),
        ]
        instrumentor = SendInstrumentor(
            sender,
            LoggingEventLogger(log),
            OtelTracingController(tracer),
        )

        assert instrumentor.send() is False

        statuses = [
            json.loads(c.args[0])["tags"]["status"]
            for c in log.info.call_args_list
        ]
        assert statuses == ["200", "400", "400", "400"]
        assert len(span_exporter.get_finished_spans()) == 1
