"""
Mail transports used by the notification dispatcher.

Two backends:
- smtp: real delivery through smtplib
- console: development backend that only logs what would be sent
"""
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, formatdate
from typing import Optional, Protocol

from .config import Settings

logger = logging.getLogger(__name__)


class MailNotConfiguredError(RuntimeError):
    pass


class MailDeliveryError(RuntimeError):
    """Raised when a transport is configured but delivery fails."""


class MailTransport(Protocol):
    def send(self, to: str, subject: str, html_body: str, text_body: Optional[str] = None) -> None: ...


class SmtpMailTransport:
    """Small SMTP wrapper for transactional notification emails."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _require_config(self) -> None:
        if not self.settings.SMTP_HOST:
            raise MailNotConfiguredError("SMTP_HOST is not set")
        if not self.settings.MAIL_FROM_EMAIL:
            raise MailNotConfiguredError("MAIL_FROM_EMAIL is not set")

    def _from_header(self) -> str:
        from_email = self.settings.MAIL_FROM_EMAIL.strip()
        from_name = (self.settings.MAIL_FROM_NAME or "").strip()
        return formataddr((from_name, from_email)) if from_name else from_email

    def build_message(self, to: str, subject: str, html_body: str, text_body: Optional[str] = None) -> EmailMessage:
        self._require_config()
        msg = EmailMessage()
        msg["From"] = self._from_header()
        msg["To"] = to
        msg["Subject"] = subject
        msg["Date"] = formatdate(localtime=True)
        msg.set_content(text_body or "This message requires an HTML capable mail client.", charset="utf-8")
        msg.add_alternative(html_body, subtype="html", charset="utf-8")
        return msg

    def send(self, to: str, subject: str, html_body: str, text_body: Optional[str] = None) -> None:
        msg = self.build_message(to, subject, html_body, text_body)
        s = self.settings

        try:
            if s.SMTP_USE_SSL:
                server: smtplib.SMTP = smtplib.SMTP_SSL(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SECONDS)
            else:
                server = smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SECONDS)

            with server:
                server.ehlo()
                if s.SMTP_USE_TLS and not s.SMTP_USE_SSL:
                    server.starttls()
                    server.ehlo()
                if s.SMTP_USERNAME:
                    server.login(s.SMTP_USERNAME, s.SMTP_PASSWORD or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailDeliveryError(f"SMTP delivery to {to} failed: {e}") from e

        logger.info("SMTP email sent: to=%s subject=%s", to, subject)


class ConsoleMailTransport:
    """Dev backend: log the message instead of delivering it (simulate email)."""

    def send(self, to: str, subject: str, html_body: str, text_body: Optional[str] = None) -> None:
        logger.info("[DEV] Email to=%s subject=%s (%d bytes html)", to, subject, len(html_body))
        if text_body:
            logger.debug("[DEV] Email text body:\n%s", text_body)


def build_mail_transport(settings: Settings) -> MailTransport:
    if settings.MAIL_BACKEND == "smtp":
        return SmtpMailTransport(settings)
    return ConsoleMailTransport()
