"""Password reset use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, Field

from warden.domain.repository import TransactionManager
from warden.domain.service import AuthenticationService, EventService, PasswordHasher
from warden.domain.value import EventName


class LocalPasswordResetRequest(BaseModel):
    """Reset link token and the new password."""

    token: str
    password: str = Field(min_length=8, max_length=128)


class LocalPasswordResetUseCase:
    """Use case for setting a new password from a reset link."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
        password_hasher: PasswordHasher,
        event_service: EventService,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.authentication_service = authentication_service
        self.password_hasher = password_hasher
        self.event_service = event_service

    async def execute(self, request: LocalPasswordResetRequest) -> None:
        """Replace the password hash and end every session of the user.

        Raises:
            InvalidOrExpiredTokenError: If the token is forged, expired, already
                used or was issued before the last password change
        """
        with logfire.span("local_password_reset"):
            password_hash = await self.password_hasher.hash_async(request.password)

            async with self.transaction_manager.transaction() as tx:
                authentication = await self.authentication_service.verify_password_reset_token(
                    tx, request.token
                )
                now = datetime.now(timezone.utc)

                await tx.authentications.save(
                    authentication.with_local(password=password_hash, password_changed_at=now)
                )
                await tx.authentications.clear_refresh_tokens(authentication.user_id, now)

                event = self.event_service.build_instance(
                    EventName.AUTH_LOCAL_PASSWORD_RESETED,
                    authentication.user_id,
                    authentication.id,
                )
                await self.event_service.create_event(event, tx)

            logfire.info("Password reset", user_id=str(authentication.user_id))
            await self.event_service.dispatch(event)
