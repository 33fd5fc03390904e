"""Shared fixtures for the mailticks tests."""

from unittest.mock import MagicMock

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
    InMemorySpanExporter,
)

from mailticks.events.base import Event, EventLogger
from mailticks.mailer.base import MailSender
from mailticks.models import Transport
from mailticks.tracing.base import TracingController

TRACE_ID = "bc5bfcc78d8d4e59b4be7453b97410d0"
SPAN_ID = "ef14c1845b4a4e0b"
PARENT_SPAN_ID = "6cb2830795b0491e"


class FakeMailer(MailSender):
    """Mail sender that delivers nothing and reports what it was told to."""

    def __init__(
        self,
        transport: Transport = Transport.SMTP,
        result: bool = True,
        error: Exception | None = None,
    ):
        super().__init__()
        self.transport = transport
        self.result = result
        self.error = error
        self.mime_header = "Content-Type: text/plain"
        self.mime_body = "full mime body"
        self.subject = "subject"
        self.from_address = "from@mail.com"
        self.send_calls = 0

    def send(self) -> bool:
        self.send_calls += 1
        if self.error is not None:
            raise self.error
        if self.result:
            for recipient in self.all_recipients():
                self.do_callback(
                    True,
                    [recipient],
                    [],
                    [],
                    self.subject,
                    self.mime_body,
                    self.from_address,
                    {"smtp_transaction_id": "4F2B51C0A1"},
                )
        return self.result


@pytest.fixture
def make_mailer():
    """Factory for fake mail senders."""
    return FakeMailer


@pytest.fixture
def mailer():
    sender = FakeMailer()
    sender.add_address("example@mail.com", "John Doe")
    return sender


@pytest.fixture
def event():
    return MagicMock(spec=Event)


@pytest.fixture
def event_logger(event):
    event_logger = MagicMock(spec=EventLogger)
    event_logger.new_event.return_value = event
    return event_logger


@pytest.fixture
def controller():
    controller = MagicMock(spec=TracingController)
    controller.get_trace_id.return_value = TRACE_ID
    controller.get_span_id.return_value = SPAN_ID
    controller.get_parent_span_id.return_value = PARENT_SPAN_ID
    controller.get_span_specific_tags.return_value = {}
    return controller


@pytest.fixture
def span_exporter():
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider.get_tracer("mailticks.tests")
