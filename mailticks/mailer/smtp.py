"""SMTP mail sender built on smtplib.

The sender builds the MIME message with the ``email`` package and delivers
it one envelope command at a time so that the outcome of every recipient is
known and can be reported through the post-send hook.
"""

import email.policy
import logging
import re
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Any
from urllib.parse import urlsplit

from mailticks.exceptions import MailTransportError
from mailticks.mailer.base import MailSender
from mailticks.models import Encoding, Recipient, Transport

logger = logging.getLogger("mailticks")

# Reply patterns of the DATA command carrying a transaction id, per MTA
TRANSACTION_ID_PATTERNS = {
    "exim": r"[\d]{3} OK id=(.*)",
    "sendmail": r"[\d]{3} 2\.0\.0 (.*) Message",
    "postfix": r"[\d]{3} 2\.0\.0 Ok: queued as (.*)",
    "microsoft_esmtp": (
        r"[0-9]{3} 2\.[\d]\.0 (.*)@(?:.*) Queued mail for delivery"
    ),
    "amazon_ses": r"[\d]{3} Ok (.*)",
    "sendgrid": r"[\d]{3} Ok: queued as (.*)",
}

ACCEPTED_RCPT_CODES = (250, 251)


def parse_transaction_id(code: int, reply: bytes | str) -> str | None:
    """Extract the server side transaction id from a DATA reply.

    Args:
        code: The SMTP reply code
        reply: The reply text returned by the server

    Returns:
        The transaction id, or None if the reply matches no known format

    Example:
        >>> parse_transaction_id(250, b"2.0.0 Ok: queued as 4F2B51C0A1")
        '4F2B51C0A1'
    """
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8", errors="replace")
    line = f"{code} {reply.strip()}"
    for pattern in TRANSACTION_ID_PATTERNS.values():
        match = re.match(pattern, line)
        if match:
            return match.group(1).strip()
    return None


class SMTPMailer(MailSender):
    """Send a message through an SMTP server."""

    transport = Transport.SMTP

    def __init__(
        self,
        host: str = "localhost",
        port: int = 25,
        helo: str = "",
        secure: str = "",
        auto_tls: bool = True,
        auth: bool = False,
        username: str = "",
        password: str = "",
        keep_alive: bool = False,
        auth_type: str = "",
        timeout: int = 300,
        options: dict[str, Any] | None = None,
        encoding: Encoding = Encoding.EIGHT_BIT,
        raise_exceptions: bool = False,
    ):
        """Initialize the sender with its transport settings.

        Args:
            host: Server host, optionally as ``scheme://host:port``
            port: Server port used when the host doesn't carry one
            helo: Name sent with EHLO, defaults to the local hostname
            secure: ``""``, ``"tls"`` for STARTTLS or ``"ssl"`` for
                implicit TLS
            auto_tls: Use STARTTLS when the server offers it
            auth: Whether to authenticate
            username: Username for authentication
            password: Password for authentication
            keep_alive: Keep the connection open between sends
            auth_type: Force an authentication mechanism, e.g. ``"PLAIN"``
            timeout: Socket timeout in seconds
            options: Extra transport options reported in telemetry
            encoding: Content transfer encoding of the body
            raise_exceptions: Raise MailTransportError instead of returning
                False on failure
        """
        super().__init__()
        self.host = host
        self.port = port
        self.helo = helo
        self.smtp_secure = secure
        self.smtp_auto_tls = auto_tls
        self.smtp_auth = auth
        self.username = username
        self.password = password
        self.smtp_keep_alive = keep_alive
        self.auth_type = auth_type
        self.timeout = timeout
        self.smtp_options = dict(options or {})
        self.encoding = encoding
        self.raise_exceptions = raise_exceptions
        self.error_info = ""
        self._message: bytes = b""
        self._smtp: smtplib.SMTP | None = None

    def send(self) -> bool:
        try:
            self.pre_send()
            return self.smtp_send()
        except MailTransportError as e:
            self.error_info = str(e)
            logger.error(f"Mail delivery failed: {e}")
            if self.raise_exceptions:
                raise
            return False

    def pre_send(self) -> None:
        """Build the MIME message and split it into header and body."""
        if not self.all_recipients():
            raise MailTransportError(
                "You must provide at least one recipient email address",
                "Add a recipient with add_address()",
            )

        message = EmailMessage(policy=email.policy.SMTP)
        message["From"] = formataddr((self.from_name, self.from_address))
        if self.to:
            message["To"] = _format_recipients(self.to)
        if self.cc:
            message["Cc"] = _format_recipients(self.cc)
        message["Subject"] = self.subject
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()

        cte = (
            Encoding.EIGHT_BIT.value
            if self.encoding == Encoding.BINARY
            else self.encoding.value
        )
        try:
            message.set_content(self.body, cte=cte)
        except ValueError as e:
            raise MailTransportError(
                f"Unable to encode message body as {cte}: {e}",
                "Use 8bit, quoted-printable or base64 encoding",
            ) from e

        self._message = message.as_bytes()
        header, _, body = self._message.partition(b"\r\n\r\n")
        self.mime_header = header.decode("utf-8", errors="replace") + "\r\n"
        self.mime_body = body.decode("utf-8", errors="replace")

    def smtp_send(self) -> bool:
        """Deliver the prepared message and report every recipient."""
        smtp = self.smtp_connect()
        results: list[tuple[Recipient, bool]] = []
        try:
            code, reply = smtp.mail(self.from_address)
            if code != 250:
                raise MailTransportError(
                    f"MAIL FROM command failed: {code} {reply!r}",
                    "Check the from address",
                )
            for recipient in self.all_recipients():
                code, reply = smtp.rcpt(recipient.address)
                if code not in ACCEPTED_RCPT_CODES:
                    logger.warning(
                        f"Recipient {recipient.address} refused: "
                        f"{code} {reply!r}"
                    )
                results.append((recipient, code in ACCEPTED_RCPT_CODES))

            if not any(accepted for _, accepted in results):
                raise MailTransportError("All recipient addresses failed")

            code, reply = smtp.data(self._message)
            if code != 250:
                raise MailTransportError(
                    f"DATA command failed: {code} {reply!r}"
                )
            transaction_id = parse_transaction_id(code, reply)

            if self.smtp_keep_alive:
                smtp.rset()
            else:
                self.close()
        except (smtplib.SMTPException, OSError) as e:
            self.close()
            raise MailTransportError(f"SMTP error: {e}") from e
        except MailTransportError:
            self.close()
            raise

        for recipient, accepted in results:
            self.do_callback(
                accepted,
                [recipient],
                [],
                [],
                self.subject,
                self.mime_body,
                self.from_address,
                {"smtp_transaction_id": transaction_id},
            )

        refused = [
            recipient for recipient, accepted in results if not accepted
        ]
        if refused:
            raise MailTransportError(
                "The following recipients failed: "
                + ", ".join(recipient.address for recipient in refused)
            )
        return True

    def smtp_connect(self) -> smtplib.SMTP:
        """Open, secure and authenticate the connection to the server."""
        if self._smtp is not None:
            return self._smtp

        host, port, secure = self._server_address()
        logger.debug(f"Connecting to SMTP server {host}:{port}")
        try:
            if secure == "ssl":
                smtp: smtplib.SMTP = smtplib.SMTP_SSL(
                    host,
                    port,
                    local_hostname=self.helo or None,
                    timeout=self.timeout,
                    context=ssl.create_default_context(),
                )
            else:
                smtp = smtplib.SMTP(
                    host,
                    port,
                    local_hostname=self.helo or None,
                    timeout=self.timeout,
                )
            try:
                smtp.ehlo()
                if secure == "tls" or (
                    secure != "ssl"
                    and self.smtp_auto_tls
                    and smtp.has_extn("starttls")
                ):
                    smtp.starttls(context=ssl.create_default_context())
                    smtp.ehlo()
                if self.smtp_auth:
                    self._login(smtp)
            except BaseException:
                # the session is never handed out, drop the socket
                smtp.close()
                raise
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(
                f"Could not connect to SMTP host {host}:{port}: {e}",
                "Check the smtp host, port and secure settings",
            ) from e

        self._smtp = smtp
        return smtp

    def close(self) -> None:
        """Close the connection to the server, if any."""
        if self._smtp is None:
            return
        smtp, self._smtp = self._smtp, None
        try:
            smtp.quit()
        except smtplib.SMTPServerDisconnected:
            logger.debug("SMTP server already disconnected")
            smtp.close()

    def _login(self, smtp: smtplib.SMTP) -> None:
        if not self.auth_type:
            smtp.login(self.username, self.password)
            return

        mechanism = self.auth_type.upper()
        authobject = getattr(
            smtp, "auth_" + mechanism.lower().replace("-", "_"), None
        )
        if authobject is None:
            raise MailTransportError(
                f"Unsupported authentication type: {self.auth_type}",
                "Use one of CRAM-MD5, PLAIN or LOGIN",
            )
        smtp.user, smtp.password = self.username, self.password
        smtp.auth(mechanism, authobject)

    def _server_address(self) -> tuple[str, int, str]:
        host = self.host
        secure = self.smtp_secure
        if "://" in host:
            parsed = urlsplit(host)
            if not secure and parsed.scheme in ("ssl", "tls"):
                secure = parsed.scheme
            return parsed.hostname or host, parsed.port or self.port, secure
        name, sep, port = host.rpartition(":")
        if sep and port.isdigit():
            return name, int(port), secure
        return host, self.port, secure


def _format_recipients(recipients: list[Recipient]) -> str:
    return ", ".join(
        formataddr((recipient.name, recipient.address))
        for recipient in recipients
    )
