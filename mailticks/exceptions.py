"""Custom exception classes for the mailticks package.

This module defines the exception hierarchy used by the instrumentor, the
bundled collaborators and the command line interface. Every error carries an
optional suggestion that is appended when the error is printed.
"""


class MailticksError(Exception):
    """Base exception class for all mailticks errors.

    All custom exceptions in the package inherit from this class, so callers
    can catch every mailticks-specific failure with a single except clause.
    """

    def __init__(self, message: str, suggestion: str = ""):
        """Initialize the exception.

        Args:
            message: The error message describing what went wrong
            suggestion: Optional suggestion for how to fix the problem
        """
        self.message = message
        self.suggestion = suggestion
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return a formatted error message with suggestion if available."""
        if self.suggestion:
            separator = "" if self.message.endswith((".", "!")) else "."
            return f"{self.message}{separator} {self.suggestion}"
        return self.message


class ConfigurationError(MailticksError):
    """Raised when there's an error in the configuration.

    This includes invalid configuration values, missing required settings,
    or improperly formatted configuration files.
    """

    pass


class TracingError(MailticksError, RuntimeError):
    """Raised when the tracing identity of an event cannot be determined."""

    pass


class MailTransportError(MailticksError):
    """Raised when the mail transport fails to deliver a message."""

    pass


class EventError(MailticksError):
    """Raised when a telemetry event is used incorrectly."""

    pass


class ValidationError(MailticksError):
    """Raised when input validation fails."""

    pass
