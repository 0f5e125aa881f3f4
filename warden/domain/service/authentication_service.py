"""Authentication domain service."""

from datetime import datetime, timezone
from typing import Optional

import logfire

from warden.config import AuthSettings
from warden.domain.error import InvalidOrExpiredTokenError, InvalidTokenError
from warden.domain.model.authentication import Authentication
from warden.domain.repository.transaction import Transaction, TransactionManager
from warden.domain.value import AuthProvider, TokenPair, TokenType

from .base import Service
from .token_service import TokenService


class AuthenticationService(Service):
    """Sessions and one-time links bound to authentication records."""

    def __init__(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize authentication service.

        Args:
            transaction_manager: Transaction manager
            token_service: Token service
            auth_settings: Authentication settings
        """
        self.transaction_manager = transaction_manager
        self.token_service = token_service
        self.auth_settings = auth_settings

    async def establish_session(
        self,
        tx: Transaction,
        authentication: Authentication,
        now: Optional[datetime] = None,
    ) -> tuple[Authentication, TokenPair]:
        """Issue a token pair for ``authentication`` and make it the only live session.

        The record's refresh token is replaced and every other record of the
        user loses its refresh token.

        Args:
            tx: Open transaction
            authentication: Record the session belongs to
            now: Access time (defaults to the current time)

        Returns:
            The saved record and the issued pair
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span(
            "authentication_service.establish_session",
            user_id=str(authentication.user_id),
            provider=authentication.provider.value,
        ):
            pair = self.token_service.generate_pair(authentication.user_id, authentication.provider)
            saved = await tx.authentications.save(
                authentication.model_copy(
                    update={"refresh_token": pair.refresh_token, "last_accessed_at": now}
                )
            )
            await tx.authentications.clear_refresh_tokens(
                authentication.user_id, now, exclude_provider=authentication.provider
            )
            return saved, pair

    def create_verification_token(self, authentication: Authentication) -> str:
        """Sign an email verification token with the global secret."""
        return self.token_service.generate(
            authentication.user_id,
            AuthProvider.LOCAL,
            TokenType.VERIFICATION,
            expires_in=self.auth_settings.verification_token_expiry_seconds,
        )

    def create_password_reset_token(self, authentication: Authentication) -> str:
        """Sign a password reset token bound to the record's current password state."""
        return self.token_service.generate(
            authentication.user_id,
            AuthProvider.LOCAL,
            TokenType.PASSWORD_RESET,
            expires_in=self.auth_settings.password_reset_token_expiry_seconds,
            secret=self._password_reset_secret(authentication),
        )

    def _password_reset_secret(self, authentication: Authentication) -> str:
        local = authentication.local
        return self.token_service.password_reset_secret(local.password, local.password_changed_at)

    async def verify_password_reset_token(self, tx: Transaction, token: str) -> Authentication:
        """Resolve a password reset token to its verified local record.

        The token is decoded without verification to find the record, then
        verified against the secret derived from that record's hash and
        last reset time. A token issued before the last password change
        therefore fails, and so does a token that was already used.

        Raises:
            InvalidOrExpiredTokenError: If the token is forged, expired or stale
        """
        try:
            claims = self.token_service.decode(token)
        except InvalidTokenError:
            raise InvalidOrExpiredTokenError()

        authentication = await tx.authentications.find_by_user_and_provider(
            claims.user_id, AuthProvider.LOCAL
        )
        if authentication is None or not authentication.is_verified_local:
            raise InvalidOrExpiredTokenError()

        try:
            self.token_service.verify(
                token,
                token_type=TokenType.PASSWORD_RESET,
                secret=self._password_reset_secret(authentication),
            )
        except InvalidTokenError:
            logfire.warn("Password reset token rejected", user_id=str(claims.user_id))
            raise InvalidOrExpiredTokenError()

        return authentication
