"""Transports that deliver store-owner failure emails."""
from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from .config import EmailConfig, SMTPSettings

logger = logging.getLogger(__name__)


class EmailProvider:
    """Delivers one rendered message; raising signals a failed attempt."""

    name = "base"

    def __init__(self, *, from_email: str) -> None:
        self.from_email = from_email

    def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        raise NotImplementedError


class DevPrintProvider(EmailProvider):
    """Logs the message instead of delivering it; used outside production."""

    name = "dev"

    def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        logger.info(
            "Failure email not delivered (dev transport)",
            extra={
                "email_recipient": to,
                "email_subject": subject,
                "email_sender": self.from_email,
            },
        )


class SMTPProvider(EmailProvider):
    name = "smtp"

    def __init__(self, settings: SMTPSettings, *, from_email: str) -> None:
        super().__init__(from_email=from_email)
        self.settings = settings

    def build_message(self, to: str, subject: str, html_body: str, text_body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = self.from_email
        message["To"] = to
        message["Subject"] = subject
        message.attach(MIMEText(text_body, "plain", "utf-8"))
        message.attach(MIMEText(html_body, "html", "utf-8"))
        return message

    def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> None:
        settings = self.settings
        message = self.build_message(to, subject, html_body, text_body)
        with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout_seconds) as client:
            if settings.use_tls:
                client.starttls()
            if settings.has_credentials:
                client.login(settings.username, settings.password)
            client.sendmail(self.from_email, [to], message.as_string())


def create_email_provider(config: EmailConfig) -> EmailProvider:
    """Pick the transport named by ``config.provider_name``.

    Unknown names fall back to :class:`DevPrintProvider` so a typo in the
    environment never breaks widget requests.
    """

    if config.provider_name == "smtp":
        return SMTPProvider(config.smtp, from_email=config.from_email)
    if config.provider_name != "dev":
        logger.warning(
            "Unknown email provider; failure emails will only be logged",
            extra={"email_provider": config.provider_name},
        )
    return DevPrintProvider(from_email=config.from_email)


__all__ = [
    "DevPrintProvider",
    "EmailProvider",
    "SMTPProvider",
    "create_email_provider",
]
