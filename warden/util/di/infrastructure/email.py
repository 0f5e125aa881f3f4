"""Email infrastructure providers."""

from dishka import Scope, provide

from warden.adapter.email.smtp import SmtpEmailTransport
from warden.config import SMTPSettings
from warden.domain.service import EmailTransport
from warden.util.di.base import ProviderBase


class EmailProvider(ProviderBase):
    """Email transport component base."""

    __mock_component__ = "email"


class ProdEmailProvider(EmailProvider):
    """Production email transport over SMTP."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_email_transport(self, smtp_settings: SMTPSettings) -> EmailTransport:
        """Provide SMTP transport."""
        return SmtpEmailTransport(smtp_settings)
