"""Tracing and analytics instrumentation of mail sending.

The instrumentor wraps a ``MailSender``: every send is bracketed by a child
span, timed, and reported as one ``outbound_requests_log`` event per logical
recipient unit. How much of the message ends up in the event is controlled
by the detail level.
"""

import logging
import time
from contextvars import ContextVar
from typing import Any

from mailticks.events.base import EventLogger
from mailticks.exceptions import TracingError
from mailticks.mailer.base import MailSender
from mailticks.models import (
    DetailLevel,
    Encoding,
    Recipient,
    SendAttempt,
    Transport,
)
from mailticks.tracing.base import TracingController
from mailticks.utils import (
    decode_body,
    execution_time,
    format_smtp_url,
    parse_mime_headers,
    prepare_log_data,
    to_json,
    url_domain,
)

logger = logging.getLogger("mailticks")

EVENT_KIND = "outbound_requests_log"

_current_attempt: ContextVar[SendAttempt | None] = ContextVar(
    "mailticks_send_attempt", default=None
)


class SendInstrumentor:
    """Instrument the send operation of a mail sender.

    The instrumentor registers itself as the post-send hook of the sender,
    so events for delivered messages are built from the sender's own
    callbacks. Failures the sender never reported are synthesized by the
    instrumentor itself.
    """

    def __init__(
        self,
        sender: MailSender,
        event_logger: EventLogger,
        tracing_controller: TracingController,
        level: DetailLevel = DetailLevel.INFO,
    ):
        """Initialize the instrumentor and hook it into the sender.

        Args:
            sender: The mail sender to instrument
            event_logger: Where telemetry events are recorded
            tracing_controller: Controller owning the spans around sends
            level: Analytics detail level
        """
        self.sender = sender
        self.event_logger = event_logger
        self.tracing_controller = tracing_controller
        self._detail_level = level

        self.sender.set_after_send_hook(self.after_sending)

    @property
    def detail_level(self) -> DetailLevel:
        return self._detail_level

    def set_detail_level(self, level: DetailLevel) -> None:
        self._detail_level = level

    def send(self) -> bool:
        """Send the message held by the sender.

        Returns:
            bool: The result of the sender, unmodified.

        Raises:
            Exception: Any error raised by the sender, after the failure has
                been recorded and the span stopped.
        """
        if self._detail_level == DetailLevel.NONE:
            return self.sender.send()

        attempt = SendAttempt(start_timestamp=time.time())
        token = _current_attempt.set(attempt)

        self.tracing_controller.start_child_span()
        try:
            try:
                result = self.sender.send()
            except Exception:
                self._failure_hook(attempt)
                raise

            if not result:
                self._failure_hook(attempt)

            return result
        finally:
            self.tracing_controller.stop_child_span()
            _current_attempt.reset(token)

    def _failure_hook(self, attempt: SendAttempt) -> None:
        """Report a send the underlying sender did not complete."""
        attempt.capture(self.sender)

        if self.sender.transport != Transport.SMTP:
            self.after_sending(
                False,
                attempt.to,
                attempt.cc,
                attempt.bcc,
                attempt.subject,
                attempt.body,
                attempt.from_address,
                {},
                attempt=attempt,
            )
            return

        # cc and bcc addresses are reported in the to slot as well
        for group in (attempt.to, attempt.cc, attempt.bcc):
            for recipient in group:
                self.after_sending(
                    False,
                    [recipient],
                    [],
                    [],
                    attempt.subject,
                    attempt.body,
                    attempt.from_address,
                    {},
                    attempt=attempt,
                )

    def after_sending(
        self,
        is_sent: bool,
        to: list[Recipient],
        cc: list[Recipient],
        bcc: list[Recipient],
        subject: str,
        body: str,
        from_address: str,
        extra: dict[str, Any],
        attempt: SendAttempt | None = None,
    ) -> None:
        """Record the outcome of one delivery as a telemetry event.

        Args:
            is_sent: Result of the send action
            to: Recipients of this delivery
            cc: Cc recipients
            bcc: Bcc recipients
            subject: The subject
            body: The email body
            from_address: Email address of the sender
            extra: Transport specific information, e.g. the SMTP
                transaction id
            attempt: The send call this delivery belongs to. Defaults to the
                send call in progress.

        Raises:
            TracingError: If the trace or span id is not available.
        """
        if self._detail_level == DetailLevel.NONE:
            return

        if attempt is None:
            attempt = _current_attempt.get()
        if attempt is None:
            logger.warning(
                "Post-send hook called outside of an instrumented send, "
                "no event recorded"
            )
            return

        end_timestamp = time.time()

        url = self.sender.host
        if self.sender.transport == Transport.SMTP:
            url = format_smtp_url(url)

        fields: dict[str, Any] = {
            "startTimestamp": attempt.start_timestamp,
            "endTimestamp": end_timestamp,
            "executionTime": execution_time(
                attempt.start_timestamp, end_timestamp
            ),
            "url": url,
        }

        if self._detail_level.atleast(DetailLevel.DETAILED):
            options = self._connection_options()
            request_body = decode_body(
                self.sender.mime_body,
                self.sender.encoding == Encoding.BASE64,
            )

            fields["requestHeaders"] = to_json(
                parse_mime_headers(self.sender.mime_header)
            )
            fields["requestBody"] = prepare_log_data(
                request_body, self._detail_level
            )
            for name, value in extra.items():
                options.setdefault(name, value)
            fields["options"] = to_json(options)

        tags = {
            "type": self.sender.transport.value.upper(),
            "status": "200" if is_sent else "400",
            "domain": url_domain(url),
        }

        event = self.event_logger.new_event(EVENT_KIND)

        trace_id = self.tracing_controller.get_trace_id()
        if trace_id is None:
            raise TracingError("Trace ID not available!")
        event.set_trace_id(trace_id)

        span_id = self.tracing_controller.get_span_id()
        if span_id is None:
            raise TracingError("Span ID not available!")
        event.set_span_id(span_id)

        parent_span_id = self.tracing_controller.get_parent_span_id()
        if parent_span_id is not None:
            event.set_parent_span_id(parent_span_id)

        event.add_tags(
            {**self.tracing_controller.get_span_specific_tags(), **tags}
        )
        event.add_fields(fields)
        event.record_timestamp()
        event.record()

        logger.debug(
            f"Recorded {EVENT_KIND} event for "
            f"{', '.join(recipient.address for recipient in to)} "
            f"with status {tags['status']}"
        )

    def _connection_options(self) -> dict[str, Any]:
        """Snapshot the transport settings of the sender."""
        if self.sender.transport != Transport.SMTP:
            return {}

        options = {
            "smtp_port": self.sender.port,
            "smtp_helo": self.sender.helo,
            "smtp_secure": self.sender.smtp_secure,
            "smtp_auto_tls": self.sender.smtp_auto_tls,
            "smtp_auth": self.sender.smtp_auth,
            "smtp_username": self.sender.username,
            "smtp_password": self.sender.password,
            "smtp_keep_alive": self.sender.smtp_keep_alive,
            "smtp_auth_type": self.sender.auth_type,
            "smtp_timeout": self.sender.timeout,
        }
        # extra transport options never override the settings above
        for name, value in self.sender.smtp_options.items():
            options.setdefault(name, value)
        return options
