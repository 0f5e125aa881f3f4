"""SMTP email transport."""

import asyncio
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import logfire

from warden.adapter.error import EmailDeliveryError
from warden.config import SMTPSettings
from warden.domain.service.email import EmailMessage, EmailTransport


class SmtpEmailTransport(EmailTransport):
    """Delivers messages over SMTP (STARTTLS or implicit TLS)."""

    def __init__(self, smtp_settings: SMTPSettings) -> None:
        """Initialize transport.

        Args:
            smtp_settings: SMTP settings
        """
        self.settings = smtp_settings

    def _build(self, message: EmailMessage) -> MIMEMultipart:
        mime = MIMEMultipart("alternative")
        mime["Subject"] = message.subject
        mime["From"] = message.from_address
        mime["To"] = message.to
        if message.text:
            mime.attach(MIMEText(message.text, "plain"))
        mime.attach(MIMEText(message.html, "html"))
        return mime

    def _send(self, message: EmailMessage) -> None:
        mime = self._build(message)
        context = ssl.create_default_context()
        settings = self.settings

        if settings.use_tls:
            with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as server:
                server.starttls(context=context)
                if settings.username and settings.password:
                    server.login(settings.username, settings.password)
                server.sendmail(message.from_address, message.to, mime.as_string())
        else:
            with smtplib.SMTP_SSL(
                settings.host, settings.port, context=context, timeout=settings.timeout
            ) as server:
                if settings.username and settings.password:
                    server.login(settings.username, settings.password)
                server.sendmail(message.from_address, message.to, mime.as_string())

    async def send_mail(self, message: EmailMessage) -> None:
        with logfire.span("smtp.send_mail", subject=message.subject):
            try:
                await asyncio.to_thread(self._send, message)
            except (smtplib.SMTPException, OSError) as e:
                logfire.error(
                    "Email delivery failed",
                    host=self.settings.host,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise EmailDeliveryError(f"Email delivery failed: {e}") from e

            logfire.info("Email sent", subject=message.subject)
