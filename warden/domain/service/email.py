"""Outbound email ports."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from warden.domain.value.common import ValueObject


class EmailMessage(ValueObject):
    """A rendered message ready for delivery."""

    from_address: str
    to: str
    subject: str
    html: str
    text: Optional[str] = None


class EmailTransport(ABC):
    """Delivers rendered messages."""

    @abstractmethod
    async def send_mail(self, message: EmailMessage) -> None:
        """Deliver ``message``.

        Raises:
            EmailDeliveryError: If delivery failed
        """
        pass


class TemplateRenderer(ABC):
    """Renders named email templates."""

    @abstractmethod
    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render ``template_name`` with ``context``.

        Raises:
            EmailTemplateError: If the template is missing or fails to render
        """
        pass
