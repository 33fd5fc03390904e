from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mailticks.mailer.base import MailSender


@total_ordering
class DetailLevel(Enum):
    """How much payload telemetry events carry, from nothing to everything."""

    NONE = "none"
    INFO = "info"
    DETAILED = "detailed"
    FULL = "full"

    @property
    def rank(self) -> int:
        return list(DetailLevel).index(self)

    def __lt__(self, other):
        if not isinstance(other, DetailLevel):
            return NotImplemented
        return self.rank < other.rank

    def atleast(self, level: DetailLevel) -> bool:
        """Return whether this level is at least as detailed as ``level``."""
        return self >= level


class Transport(Enum):
    SMTP = "smtp"
    SENDMAIL = "sendmail"
    MAIL = "mail"
    QMAIL = "qmail"


class Encoding(Enum):
    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BASE64 = "base64"
    QUOTED_PRINTABLE = "quoted-printable"
    BINARY = "binary"


@dataclass(frozen=True)
class Recipient:
    address: str
    name: str = ""

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address


@dataclass
class SendAttempt:
    """State of a single instrumented send call.

    Attributes:
        start_timestamp: Wall clock time the call started, in seconds
        to: Primary recipients of the message
        cc: Carbon copy recipients
        bcc: Blind carbon copy recipients
        subject: The message subject
        body: The encoded message body
        from_address: Email address of the sender
        extra: Transport specific metadata, e.g. an SMTP transaction id
    """

    start_timestamp: float
    to: list[Recipient] = field(default_factory=list)
    cc: list[Recipient] = field(default_factory=list)
    bcc: list[Recipient] = field(default_factory=list)
    subject: str = ""
    body: str = ""
    from_address: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    def capture(self, sender: MailSender) -> None:
        """Snapshot the message state of ``sender`` into this attempt."""
        self.to = list(sender.to)
        self.cc = list(sender.cc)
        self.bcc = list(sender.bcc)
        self.subject = sender.subject
        self.body = sender.mime_body
        self.from_address = sender.from_address
