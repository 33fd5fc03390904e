__version__ = "0.1.0"

from .config import Config, load_config
from .events import Event, EventLogger, LoggingEventLogger, SpanEventLogger
from .exceptions import (
    ConfigurationError,
    EventError,
    MailticksError,
    MailTransportError,
    TracingError,
)
from .instrumentor import SendInstrumentor
from .mailer import MailSender, SMTPMailer
from .models import DetailLevel, Encoding, Recipient, SendAttempt, Transport
from .tracing import OtelTracingController, TracingController

__all__ = [
    # Config
    "Config",
    "load_config",
    # Core
    "SendInstrumentor",
    "DetailLevel",
    "SendAttempt",
    "Recipient",
    "Transport",
    "Encoding",
    # Collaborators
    "MailSender",
    "SMTPMailer",
    "TracingController",
    "OtelTracingController",
    "EventLogger",
    "Event",
    "LoggingEventLogger",
    "SpanEventLogger",
    # Errors
    "MailticksError",
    "ConfigurationError",
    "TracingError",
    "MailTransportError",
    "EventError",
]
