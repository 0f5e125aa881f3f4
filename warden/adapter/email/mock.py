"""Mock email transport for tests and local development."""

import logfire

from warden.adapter.error import EmailDeliveryError
from warden.domain.service.email import EmailMessage, EmailTransport


class MockEmailTransport(EmailTransport):
    """Records messages instead of sending them.

    Set ``fail`` to make every delivery raise ``EmailDeliveryError``.
    """

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []
        self.fail = False

    async def send_mail(self, message: EmailMessage) -> None:
        if self.fail:
            raise EmailDeliveryError("Mock transport configured to fail")
        logfire.info("Mock email recorded", subject=message.subject)
        self.sent.append(message)
