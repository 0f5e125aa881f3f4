"""Token domain service."""

import hashlib
import hmac
import time
from datetime import datetime
from uuid import uuid4

import logfire
import pydantic

from warden.config import AuthSettings
from warden.domain.error import InvalidTokenError
from warden.domain.value import AuthProvider, TokenPair, TokenPayload, TokenType, UserId
from warden.util.jwt import JWTError, decode_token, decode_unverified, encode_token

from .base import Service
from .revocation_store import RevocationStore

DEFAULT_EXPIRY_SECONDS = 24 * 60 * 60


class TokenService(Service):
    """Issues, verifies and revokes signed tokens.

    Every token carries ``user_id``, ``provider``, ``typ``, ``iat`` and
    ``exp``. Access tokens also carry a ``jwti`` used for blacklisting.
    Each consumer of a token checks ``typ``, so a refresh or verification
    token is never accepted where an access token is expected.
    """

    def __init__(self, auth_settings: AuthSettings, revocation_store: RevocationStore) -> None:
        """Initialize token service.

        Args:
            auth_settings: Authentication settings
            revocation_store: Store holding blacklisted token ids
        """
        self.auth_settings = auth_settings
        self.revocation_store = revocation_store

    def generate(
        self,
        user_id: UserId,
        provider: AuthProvider,
        token_type: TokenType,
        *,
        jwti: str | None = None,
        expires_in: int | None = None,
        secret: str | None = None,
    ) -> str:
        """Sign a token.

        Args:
            user_id: Subject of the token
            provider: Provider the session belongs to
            token_type: Intended use, stored in the ``typ`` claim
            jwti: Token id (access tokens only)
            expires_in: Lifetime in seconds (defaults to one day)
            secret: Signing secret (defaults to the global JWT secret)

        Returns:
            Encoded token
        """
        issued_at = int(time.time())
        claims = {
            "user_id": str(user_id),
            "provider": provider.value,
            "typ": token_type.value,
            "iat": issued_at,
            "exp": issued_at + (expires_in if expires_in is not None else DEFAULT_EXPIRY_SECONDS),
        }
        if jwti is not None:
            claims["jwti"] = jwti

        return encode_token(
            claims,
            secret or self.auth_settings.jwt_secret,
            self.auth_settings.jwt_algorithm,
        )

    def generate_pair(self, user_id: UserId, provider: AuthProvider) -> TokenPair:
        """Issue an access token with a fresh ``jwti`` and a refresh token."""
        with logfire.span("token_service.generate_pair", user_id=str(user_id), provider=provider.value):
            jwti = uuid4().hex
            access_token = self.generate(
                user_id,
                provider,
                TokenType.ACCESS,
                jwti=jwti,
                expires_in=self.auth_settings.access_token_expiry_seconds,
            )
            refresh_token = self.generate(
                user_id,
                provider,
                TokenType.REFRESH,
                expires_in=self.auth_settings.refresh_token_expiry_seconds,
            )
            return TokenPair(access_token=access_token, refresh_token=refresh_token, jwti=jwti)

    def verify(
        self,
        token: str,
        *,
        token_type: TokenType | None = None,
        secret: str | None = None,
        ignore_expiration: bool = False,
    ) -> TokenPayload:
        """Verify signature and expiry and return the claims.

        Args:
            token: Encoded token
            token_type: Required ``typ`` claim (any type when omitted)
            secret: Signing secret (defaults to the global JWT secret)
            ignore_expiration: Accept expired tokens

        Returns:
            Token payload

        Raises:
            InvalidTokenError: If the token is malformed, forged, expired or
                of another type
        """
        try:
            claims = decode_token(
                token,
                secret or self.auth_settings.jwt_secret,
                self.auth_settings.jwt_algorithm,
                verify_exp=not ignore_expiration,
            )
            payload = TokenPayload.model_validate(claims)
        except (JWTError, pydantic.ValidationError) as e:
            logfire.debug("Token verification failed", error=str(e))
            raise InvalidTokenError() from e

        if token_type is not None and payload.typ != token_type:
            logfire.debug(
                "Token type mismatch", expected=token_type.value, actual=payload.typ.value
            )
            raise InvalidTokenError()
        return payload

    def decode(self, token: str) -> TokenPayload:
        """Read claims without verifying signature or expiry.

        Raises:
            InvalidTokenError: If the token is not a well-formed JWT
        """
        try:
            return TokenPayload.model_validate(decode_unverified(token))
        except (JWTError, pydantic.ValidationError) as e:
            raise InvalidTokenError() from e

    def password_reset_secret(
        self, password_hash: str, password_changed_at: datetime | None = None
    ) -> str:
        """Per-record signing secret for password reset tokens.

        Bound to the stored hash and the time of the last reset, so a reset
        token stops verifying once it has been used, even when the new
        password hashes to the old value.
        """
        message = password_hash
        if password_changed_at is not None:
            message = f"{password_hash}:{password_changed_at.isoformat()}"
        return hmac.new(
            self.auth_settings.jwt_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    async def is_blacklisted(self, jwti: str) -> bool:
        """Check whether an access token id was revoked."""
        return await self.revocation_store.is_revoked(jwti)

    async def add_to_blacklist(self, jwti: str, exp: int) -> None:
        """Revoke an access token id until the token would expire anyway.

        Idempotent. A token that is already expired is not stored.
        """
        ttl = max(0, exp - int(time.time()))
        with logfire.span("token_service.add_to_blacklist", ttl=ttl):
            await self.revocation_store.revoke(jwti, ttl)

    async def authenticate(self, token: str) -> TokenPayload:
        """Verify an access token and reject revoked ones.

        Refresh, verification and reset tokens are rejected, as is any token
        without a ``jwti`` (it could never be revoked).

        Raises:
            InvalidTokenError: If the token is invalid, not an access token
                or blacklisted
        """
        payload = self.verify(token, token_type=TokenType.ACCESS)
        if payload.jwti is None:
            raise InvalidTokenError()
        if await self.is_blacklisted(payload.jwti):
            logfire.warn("Rejected revoked token", user_id=str(payload.user_id))
            raise InvalidTokenError("Token has been revoked.")
        return payload
