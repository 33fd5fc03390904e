"""Base classes for mail senders in the mailticks package.

This module defines the abstract base class the send instrumentor depends
on. A sender holds the message state and the transport settings, performs the
actual delivery and reports the outcome through an injected post-send hook.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from mailticks.models import Encoding, Recipient, Transport

# (is_sent, to, cc, bcc, subject, body, from_address, extra)
AfterSendHook = Callable[
    [
        bool,
        list[Recipient],
        list[Recipient],
        list[Recipient],
        str,
        str,
        str,
        dict[str, Any],
    ],
    None,
]


class MailSender(ABC):
    """Abstract base class for sending a single mail message.

    Subclasses fill in the transport settings and message state below and
    implement ``send``. After a real delivery attempt they must call
    ``do_callback`` once per logical recipient unit.
    """

    transport: Transport = Transport.SMTP
    host: str = "localhost"
    port: int = 25
    helo: str = ""
    smtp_secure: str = ""
    smtp_auto_tls: bool = True
    smtp_auth: bool = False
    username: str = ""
    password: str = ""
    smtp_keep_alive: bool = False
    auth_type: str = ""
    timeout: int = 300
    smtp_options: dict[str, Any]

    to: list[Recipient]
    cc: list[Recipient]
    bcc: list[Recipient]
    subject: str = ""
    body: str = ""
    from_address: str = ""
    from_name: str = ""
    encoding: Encoding = Encoding.EIGHT_BIT
    mime_header: str = ""
    mime_body: str = ""
    error_info: str = ""

    def __init__(self):
        self.smtp_options = {}
        self.to = []
        self.cc = []
        self.bcc = []
        self._after_send_hook: AfterSendHook | None = None

    @abstractmethod
    def send(self) -> bool:
        """Create the message and deliver it.

        Returns:
            bool: False if the message could not be delivered.

        Raises:
            MailTransportError: On a hard transport failure, if the sender is
                configured to raise.
        """

    def set_after_send_hook(self, hook: AfterSendHook | None) -> None:
        """Register the callable invoked after each delivery attempt."""
        self._after_send_hook = hook

    def do_callback(
        self,
        is_sent: bool,
        to: list[Recipient],
        cc: list[Recipient],
        bcc: list[Recipient],
        subject: str,
        body: str,
        from_address: str,
        extra: dict[str, Any],
    ) -> None:
        if self._after_send_hook is not None:
            self._after_send_hook(
                is_sent, to, cc, bcc, subject, body, from_address, extra
            )

    def add_address(self, address: str, name: str = "") -> None:
        self.to.append(Recipient(address, name))

    def add_cc(self, address: str, name: str = "") -> None:
        self.cc.append(Recipient(address, name))

    def add_bcc(self, address: str, name: str = "") -> None:
        self.bcc.append(Recipient(address, name))

    def clear_recipients(self) -> None:
        self.to.clear()
        self.cc.clear()
        self.bcc.clear()

    def all_recipients(self) -> list[Recipient]:
        return [*self.to, *self.cc, *self.bcc]
