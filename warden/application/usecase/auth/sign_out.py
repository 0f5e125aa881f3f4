"""Sign-out use case."""

import logfire

from warden.domain.repository import TransactionManager
from warden.domain.service import TokenService
from warden.domain.value import TokenPayload


class SignOutUseCase:
    """Use case for ending the session of one provider."""

    def __init__(self, transaction_manager: TransactionManager, token_service: TokenService) -> None:
        self.transaction_manager = transaction_manager
        self.token_service = token_service

    async def execute(self, payload: TokenPayload) -> None:
        """Blacklist the access token and drop the provider's refresh token.

        Args:
            payload: Claims of the (already authenticated) access token
        """
        with logfire.span(
            "sign_out", user_id=str(payload.user_id), provider=payload.provider.value
        ):
            if payload.jwti is not None:
                await self.token_service.add_to_blacklist(payload.jwti, payload.exp)

            async with self.transaction_manager.transaction() as tx:
                authentication = await tx.authentications.find_by_user_and_provider(
                    payload.user_id, payload.provider
                )
                if authentication is not None:
                    await tx.authentications.save(
                        authentication.model_copy(update={"refresh_token": None})
                    )

            logfire.info("User signed out", user_id=str(payload.user_id))
