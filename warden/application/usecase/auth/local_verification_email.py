"""Local email verification use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel

from warden.domain.error import AlreadyVerifiedError, InvalidTokenError, NotFoundError
from warden.domain.repository import TransactionManager
from warden.domain.service import AuthenticationService, EventService, TokenService
from warden.domain.value import AuthProvider, EventName, TokenType


class LocalVerificationEmailRequest(BaseModel):
    """Verification link token."""

    token: str


class LocalVerificationEmailResponse(BaseModel):
    """Verification signs the user in with an access token only."""

    access_token: str


class LocalVerificationEmailUseCase:
    """Use case for confirming a pending local record."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        authentication_service: AuthenticationService,
        event_service: EventService,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.token_service = token_service
        self.authentication_service = authentication_service
        self.event_service = event_service

    async def execute(
        self, request: LocalVerificationEmailRequest
    ) -> LocalVerificationEmailResponse:
        """Mark the record verified, start a session and publish the profile.

        Raises:
            InvalidTokenError: If the token is invalid or not a local verification token
            NotFoundError: If the user has no local record
            AlreadyVerifiedError: If the record is already verified
        """
        payload = self.token_service.verify(request.token, token_type=TokenType.VERIFICATION)
        if payload.provider != AuthProvider.LOCAL:
            logfire.warn("Verification token for non-local provider", provider=payload.provider.value)
            raise InvalidTokenError()

        with logfire.span("local_verification_email", user_id=str(payload.user_id)):
            async with self.transaction_manager.transaction() as tx:
                authentication = await tx.authentications.find_by_user_and_provider(
                    payload.user_id, AuthProvider.LOCAL
                )
                if authentication is None:
                    raise NotFoundError("Authentication", str(payload.user_id))
                if authentication.local.is_email_verified:
                    raise AlreadyVerifiedError()

                now = datetime.now(timezone.utc)
                temporary_info = authentication.local.temporary_info

                authentication, pair = await self.authentication_service.establish_session(
                    tx,
                    authentication.with_local(
                        is_email_verified=True,
                        verification_confirmed_at=now,
                        temporary_info=None,
                    ),
                    now,
                )

                if temporary_info is not None:
                    await tx.users.update_profile_fields(
                        authentication.user_id, temporary_info.profile_fields()
                    )

                event = self.event_service.build_instance(
                    EventName.AUTH_LOCAL_EMAIL_VERIFICATION_VERIFIED,
                    authentication.user_id,
                    authentication.id,
                )
                await self.event_service.create_event(event, tx)

            logfire.info("Email verified", user_id=str(authentication.user_id))
            await self.event_service.dispatch(event)

            return LocalVerificationEmailResponse(access_token=pair.access_token)
