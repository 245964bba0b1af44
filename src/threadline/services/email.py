"""Outgoing email over SMTP."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from threadline.core.settings import settings

logger = logging.getLogger(__name__)


class EmailSender:
    """Sends HTML email through the configured SMTP relay.

    Failures propagate to the caller; nothing here retries.
    """

    def __init__(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool | None = None,
        sender: str | None = None,
    ) -> None:
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.username = username if username is not None else settings.smtp_username
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.sender = sender or settings.mail_from

    def build_message(self, to: str, html: str, subject: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def send(self, to: str, html: str, subject: str) -> None:
        """Deliver one message to `to`."""
        message = self.build_message(to, html, subject)
        with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)
        logger.info("Sent %r email to %s", subject, to)


def get_email_sender() -> EmailSender:
    """Return an SMTP sender configured from settings."""
    return EmailSender()
