"""Local sign-in use case."""

import logfire
from pydantic import BaseModel

from warden.domain.error import UnauthorizedError
from warden.domain.model import Principal
from warden.domain.repository import TransactionManager
from warden.domain.service import AuthenticationService
from warden.domain.value import AuthProvider


class LocalSignInRequest(BaseModel):
    """Principal already authenticated by ``LocalStrategy``."""

    principal: Principal


class LocalSignInResponse(BaseModel):
    """Local sign-in response."""

    access_token: str
    refresh_token: str


class LocalSignInUseCase:
    """Use case for starting a session on a verified local record.

    The password check is done by ``LocalStrategy`` before this runs.
    """

    def __init__(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.authentication_service = authentication_service

    async def execute(self, request: LocalSignInRequest) -> LocalSignInResponse:
        """Issue tokens and clear the sessions of every other provider.

        The record loaded on the principal is re-read inside the
        transaction so a concurrent change (e.g. a password reset) is not
        overwritten.

        Raises:
            UnauthorizedError: If the user has no verified local record
        """
        user = request.principal.user
        with logfire.span("local_sign_in", user_id=str(user.id)):
            async with self.transaction_manager.transaction() as tx:
                loaded = request.principal.find(AuthProvider.LOCAL)
                if loaded is not None:
                    authentication = await tx.authentications.find_by_id(loaded.id)
                else:
                    authentication = await tx.authentications.find_by_user_and_provider(
                        user.id, AuthProvider.LOCAL
                    )

                if authentication is None or not authentication.is_verified_local:
                    logfire.info("Local sign-in rejected", user_id=str(user.id))
                    raise UnauthorizedError()

                _, pair = await self.authentication_service.establish_session(tx, authentication)

            logfire.info("User signed in", user_id=str(user.id), provider=AuthProvider.LOCAL.value)
            return LocalSignInResponse(
                access_token=pair.access_token, refresh_token=pair.refresh_token
            )
