"""Access token refresh use case."""

import hmac
from datetime import datetime, timezone
from uuid import uuid4

import logfire
from pydantic import BaseModel

from warden.config import AuthSettings
from warden.domain.error import InvalidTokenError, UnauthorizedError
from warden.domain.repository import TransactionManager
from warden.domain.service import TokenService
from warden.domain.value import TokenType


class RefreshAccessTokenRequest(BaseModel):
    """Refresh token held by the client."""

    refresh_token: str


class RefreshAccessTokenResponse(BaseModel):
    """New access token. ``refresh_token`` is set only when it was rotated."""

    access_token: str
    refresh_token: str | None = None


class RefreshAccessTokenUseCase:
    """Use case for exchanging a refresh token for a new access token."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.token_service = token_service
        self.auth_settings = auth_settings

    async def execute(self, request: RefreshAccessTokenRequest) -> RefreshAccessTokenResponse:
        """Issue a new access token if the refresh token is still the live one.

        Every failure is reported as the same ``UnauthorizedError``.
        """
        try:
            payload = self.token_service.verify(request.refresh_token, token_type=TokenType.REFRESH)
        except InvalidTokenError:
            raise UnauthorizedError()

        with logfire.span(
            "refresh_access_token", user_id=str(payload.user_id), provider=payload.provider.value
        ):
            async with self.transaction_manager.transaction() as tx:
                authentication = await tx.authentications.find_by_user_and_provider(
                    payload.user_id, payload.provider
                )
                if (
                    authentication is None
                    or authentication.refresh_token is None
                    or not hmac.compare_digest(authentication.refresh_token, request.refresh_token)
                ):
                    logfire.warn("Superseded or unknown refresh token", user_id=str(payload.user_id))
                    raise UnauthorizedError()

                rotated_refresh_token = None
                if self.auth_settings.rotate_refresh_tokens:
                    pair = self.token_service.generate_pair(payload.user_id, payload.provider)
                    access_token = pair.access_token
                    rotated_refresh_token = pair.refresh_token
                else:
                    access_token = self.token_service.generate(
                        payload.user_id,
                        payload.provider,
                        TokenType.ACCESS,
                        jwti=uuid4().hex,
                        expires_in=self.auth_settings.access_token_expiry_seconds,
                    )

                await tx.authentications.save(
                    authentication.model_copy(
                        update={
                            "refresh_token": rotated_refresh_token or authentication.refresh_token,
                            "last_accessed_at": datetime.now(timezone.utc),
                        }
                    )
                )

            logfire.info(
                "Access token refreshed",
                user_id=str(payload.user_id),
                rotated=rotated_refresh_token is not None,
            )
            return RefreshAccessTokenResponse(
                access_token=access_token, refresh_token=rotated_refresh_token
            )
