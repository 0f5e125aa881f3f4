"""Outbound email consumer.

Handles the facts that require an email. Each handler re-reads the
authentication record named by the event's ``model_id``, renders the email
and, inside one transaction, records the callback URL, appends the "sent"
event and calls the transport. A transport failure rolls the transaction
back and the message is nacked for redelivery.
"""

from datetime import datetime, timezone
from typing import Awaitable, Callable
from urllib.parse import urlencode

import logfire

from warden.config import Settings
from warden.domain.error import NotFoundError
from warden.domain.model import Authentication, BaseEvent, parse_event
from warden.domain.repository import Transaction, TransactionManager
from warden.domain.service import (
    AuthenticationService,
    EmailMessage,
    EmailTransport,
    EventService,
    MessageChannel,
    ReceivedMessage,
    TemplateRenderer,
)
from warden.domain.value import EventName

VERIFICATION_TEMPLATE = "local_email_verification.html"
PASSWORD_RESET_TEMPLATE = "local_password_reset.html"

VERIFICATION_PATH = "/api/v1/auth/local/verification/email"
PASSWORD_RESET_PATH = "/local/password/reset"


class EmailConsumer:
    """Sends verification and password reset emails from channel messages."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
        event_service: EventService,
        email_transport: EmailTransport,
        template_renderer: TemplateRenderer,
        settings: Settings,
    ) -> None:
        """Initialize email consumer.

        Args:
            transaction_manager: Transaction manager
            authentication_service: Mints the link tokens
            event_service: Event recorder
            email_transport: Outbound email transport
            template_renderer: Email template renderer
            settings: Application settings (URLs, sender, token lifetimes)
        """
        self.transaction_manager = transaction_manager
        self.authentication_service = authentication_service
        self.event_service = event_service
        self.email_transport = email_transport
        self.template_renderer = template_renderer
        self.settings = settings

    def register(self, channel: MessageChannel) -> None:
        """Subscribe the handlers to ``channel``."""
        channel.subscribe(EventName.AUTH_LOCAL_CREATED.value, self.handle_local_created)
        channel.subscribe(EventName.AUTH_LOCAL_PASSWORD_RESET.value, self.handle_password_reset)

    async def handle_local_created(self, message: ReceivedMessage) -> None:
        await self._settle(message, self.send_verification_email)

    async def handle_password_reset(self, message: ReceivedMessage) -> None:
        await self._settle(message, self.send_password_reset_email)

    async def _settle(
        self,
        message: ReceivedMessage,
        handler: Callable[[BaseEvent], Awaitable[None]],
    ) -> None:
        """Ack after the handler succeeds, nack on any failure."""
        with logfire.span(
            "email_consumer.handle",
            pattern=message.pattern,
            delivery_count=message.delivery_count,
        ):
            try:
                await handler(parse_event(message.payload))
            except Exception as e:
                logfire.error(
                    "Email handler failed, message will be redelivered",
                    pattern=message.pattern,
                    delivery_count=message.delivery_count,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                await message.nack()
                return

            await message.ack()

    async def _load(self, tx: Transaction, event: BaseEvent) -> Authentication:
        authentication = await tx.authentications.find_by_id(event.model_id)
        if authentication is None:
            raise NotFoundError("Authentication", str(event.model_id))
        return authentication

    async def send_verification_email(self, event: BaseEvent) -> None:
        """Email the verification link of a pending local record.

        Records that were verified in the meantime are skipped.
        """
        recipient = event.metadata.email
        async with self.transaction_manager.transaction() as tx:
            authentication = await self._load(tx, event)
            if authentication.local.is_email_verified:
                logfire.info("Skipping verification email for verified record", user_id=str(event.user_id))
                return

            token = self.authentication_service.create_verification_token(authentication)
            callback_url = (
                f"{self.settings.server.base_url}{VERIFICATION_PATH}?{urlencode({'token': token})}"
            )
            html = self.template_renderer.render(
                VERIFICATION_TEMPLATE,
                {"username": event.metadata.username, "callback_url": callback_url},
            )

            await tx.authentications.save(
                authentication.with_local(
                    callback_url=callback_url, verification_sent_at=datetime.now(timezone.utc)
                )
            )
            sent = self.event_service.build_instance(
                EventName.AUTH_LOCAL_EMAIL_VERIFICATION_SENT,
                authentication.user_id,
                authentication.id,
                {"email": recipient},
            )
            await self.event_service.create_event(sent, tx)

            await self.email_transport.send_mail(
                EmailMessage(
                    from_address=self.settings.smtp.from_address,
                    to=recipient,
                    subject="Verify your email address",
                    html=html,
                    text=f"Verify your email address: {callback_url}",
                )
            )

        logfire.info("Verification email sent", user_id=str(event.user_id))
        await self.event_service.dispatch(sent)

    async def send_password_reset_email(self, event: BaseEvent) -> None:
        """Email a password reset link bound to the record's current hash.

        Records that are no longer verified local records are skipped.
        """
        recipient = event.metadata.email
        async with self.transaction_manager.transaction() as tx:
            authentication = await self._load(tx, event)
            if not authentication.is_verified_local:
                logfire.warn("Skipping password reset email for unverified record", user_id=str(event.user_id))
                return

            token = self.authentication_service.create_password_reset_token(authentication)
            callback_url = (
                f"{self.settings.client.base_url}{PASSWORD_RESET_PATH}?{urlencode({'token': token})}"
            )
            html = self.template_renderer.render(
                PASSWORD_RESET_TEMPLATE,
                {
                    "username": event.metadata.username,
                    "callback_url": callback_url,
                    "expires_in_minutes": self.settings.auth.password_reset_token_expiry_seconds // 60,
                },
            )

            await tx.authentications.save(authentication.with_local(callback_url=callback_url))
            sent = self.event_service.build_instance(
                EventName.AUTH_LOCAL_PASSWORD_RESET_SENT,
                authentication.user_id,
                authentication.id,
                {"email": recipient},
            )
            await self.event_service.create_event(sent, tx)

            await self.email_transport.send_mail(
                EmailMessage(
                    from_address=self.settings.smtp.from_address,
                    to=recipient,
                    subject="Reset your password",
                    html=html,
                    text=f"Reset your password: {callback_url}",
                )
            )

        logfire.info("Password reset email sent", user_id=str(event.user_id))
        await self.event_service.dispatch(sent)
