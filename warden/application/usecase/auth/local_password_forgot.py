"""Password forgot use case."""

import logfire
from pydantic import BaseModel, field_validator

from warden.domain.repository import TransactionManager
from warden.domain.service import EventService, UserService
from warden.domain.value import AuthProvider, EventName


class LocalPasswordForgotRequest(BaseModel):
    """Email address to send the reset link to."""

    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LocalPasswordForgotResponse(BaseModel):
    """Same response whether or not the email is registered."""

    message: str = "If the email is registered, a password reset link has been sent."


class LocalPasswordForgotUseCase:
    """Use case for requesting a password reset email."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        event_service: EventService,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.event_service = event_service

    async def execute(self, request: LocalPasswordForgotRequest) -> LocalPasswordForgotResponse:
        """Record ``AUTH_LOCAL_PASSWORD_RESET`` for a verified local record.

        Unknown and unverified emails are logged and answered with the same
        response, so the caller cannot tell whether an account exists. The
        reset token itself is minted when the email is sent.
        """
        with logfire.span("local_password_forgot"):
            async with self.transaction_manager.transaction() as tx:
                principal = await self.user_service.find_principal(tx, email=request.email)
                authentication = principal.find(AuthProvider.LOCAL) if principal else None

                if principal is None or authentication is None or not authentication.is_verified_local:
                    logfire.warn("Password reset requested for unknown or unverified email")
                    return LocalPasswordForgotResponse()

                event = self.event_service.build_instance(
                    EventName.AUTH_LOCAL_PASSWORD_RESET,
                    principal.user.id,
                    authentication.id,
                    {"email": principal.user.email, "username": principal.user.username},
                )
                await self.event_service.create_event(event, tx)

            logfire.info("Password reset requested", user_id=str(principal.user.id))
            await self.event_service.dispatch(event)
            return LocalPasswordForgotResponse()
