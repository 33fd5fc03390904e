"""Mail senders wrapped by the send instrumentor."""

from .base import AfterSendHook, MailSender
from .smtp import SMTPMailer, parse_transaction_id

__all__ = [
    "AfterSendHook",
    "MailSender",
    "SMTPMailer",
    "parse_transaction_id",
]
