"""Unit tests for TokenService."""

import time
from datetime import datetime, timezone
from uuid import uuid4

import jwt
import pytest
from dishka import AsyncContainer

from warden.config import AuthSettings
from warden.domain.error import InvalidTokenError
from warden.domain.service import TokenService
from warden.domain.value import AuthProvider, TokenType, UserId
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestTokenService:
    """Tests for TokenService."""

    @pytest.mark.asyncio
    async def test_decode_reproduces_generated_claims(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        user_id = UserId(uuid4())

        token = token_service.generate(
            user_id, AuthProvider.GOOGLE, TokenType.ACCESS, jwti="abc123"
        )
        payload = token_service.decode(token)

        assert payload.user_id == user_id
        assert payload.provider == AuthProvider.GOOGLE
        assert payload.jwti == "abc123"
        assert payload.typ == TokenType.ACCESS

    @pytest.mark.asyncio
    async def test_default_expiry_is_one_day(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)

        payload = token_service.verify(
            token_service.generate(UserId(uuid4()), AuthProvider.LOCAL, TokenType.VERIFICATION)
        )

        assert payload.exp - payload.iat == 24 * 60 * 60
        assert payload.jwti is None

    @pytest.mark.asyncio
    async def test_verify_rejects_expired_tokens_unless_ignored(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)

        token = token_service.generate(
            UserId(uuid4()), AuthProvider.LOCAL, TokenType.REFRESH, expires_in=-10
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)
        assert token_service.verify(token, ignore_expiration=True).provider == AuthProvider.LOCAL

    @pytest.mark.asyncio
    async def test_verify_rejects_foreign_signature(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        now = int(time.time())
        forged = jwt.encode(
            {
                "user_id": str(uuid4()),
                "provider": "local",
                "typ": "access",
                "iat": now,
                "exp": now + 60,
            },
            "some-other-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(forged)

    @pytest.mark.asyncio
    async def test_verify_rejects_missing_user_id(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        settings = await unit_env.get(AuthSettings)
        now = int(time.time())
        token = jwt.encode(
            {"provider": "local", "typ": "access", "iat": now, "exp": now + 60},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    @pytest.mark.asyncio
    async def test_decode_rejects_garbage(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)

        with pytest.raises(InvalidTokenError):
            token_service.decode("not-a-token")

    @pytest.mark.asyncio
    async def test_custom_secret_is_required_to_verify(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        secret = token_service.password_reset_secret("ab" * 64)

        token = token_service.generate(
            UserId(uuid4()), AuthProvider.LOCAL, TokenType.PASSWORD_RESET, secret=secret
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)
        assert token_service.verify(token, secret=secret).provider == AuthProvider.LOCAL

    @pytest.mark.asyncio
    async def test_generate_pair_issues_fresh_token_ids(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        user_id = UserId(uuid4())

        first = token_service.generate_pair(user_id, AuthProvider.LOCAL)
        second = token_service.generate_pair(user_id, AuthProvider.LOCAL)

        assert first.jwti != second.jwti
        assert token_service.verify(first.access_token).jwti == first.jwti
        assert token_service.verify(first.refresh_token).jwti is None
        assert token_service.verify(first.refresh_token).typ == TokenType.REFRESH


class TestBlacklist:
    """Tests for token revocation."""

    @pytest.mark.asyncio
    async def test_add_to_blacklist_is_idempotent(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        exp = int(time.time()) + 3600

        await token_service.add_to_blacklist("jwti-1", exp)
        await token_service.add_to_blacklist("jwti-1", exp)

        assert await token_service.is_blacklisted("jwti-1") is True

    @pytest.mark.asyncio
    async def test_expired_token_is_not_stored(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)

        await token_service.add_to_blacklist("jwti-old", int(time.time()) - 5)

        assert await token_service.is_blacklisted("jwti-old") is False

    @pytest.mark.asyncio
    async def test_authenticate_rejects_revoked_access_token(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        pair = token_service.generate_pair(UserId(uuid4()), AuthProvider.LOCAL)

        payload = await token_service.authenticate(pair.access_token)
        await token_service.add_to_blacklist(payload.jwti, payload.exp)

        with pytest.raises(InvalidTokenError, match="revoked"):
            await token_service.authenticate(pair.access_token)

    @pytest.mark.asyncio
    async def test_authenticate_rejects_refresh_token(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        pair = token_service.generate_pair(UserId(uuid4()), AuthProvider.LOCAL)

        with pytest.raises(InvalidTokenError):
            await token_service.authenticate(pair.refresh_token)

    @pytest.mark.asyncio
    async def test_authenticate_rejects_verification_token(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        token = token_service.generate(UserId(uuid4()), AuthProvider.LOCAL, TokenType.VERIFICATION)

        with pytest.raises(InvalidTokenError):
            await token_service.authenticate(token)

    @pytest.mark.asyncio
    async def test_authenticate_rejects_access_token_without_jwti(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        token = token_service.generate(UserId(uuid4()), AuthProvider.LOCAL, TokenType.ACCESS)

        with pytest.raises(InvalidTokenError):
            await token_service.authenticate(token)


class TestTokenTypes:
    """Tests for the ``typ`` claim."""

    @pytest.mark.asyncio
    async def test_verify_enforces_requested_type(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        pair = token_service.generate_pair(UserId(uuid4()), AuthProvider.LOCAL)

        refresh = token_service.verify(pair.refresh_token, token_type=TokenType.REFRESH)
        assert refresh.typ == TokenType.REFRESH
        with pytest.raises(InvalidTokenError):
            token_service.verify(pair.access_token, token_type=TokenType.REFRESH)
        with pytest.raises(InvalidTokenError):
            token_service.verify(pair.refresh_token, token_type=TokenType.VERIFICATION)

    @pytest.mark.asyncio
    async def test_untyped_token_is_rejected(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        settings = await unit_env.get(AuthSettings)
        now = int(time.time())
        token = jwt.encode(
            {"user_id": str(uuid4()), "provider": "local", "iat": now, "exp": now + 60},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(InvalidTokenError):
            token_service.verify(token)


class TestPasswordResetSecret:
    """Tests for the per-record reset secret."""

    @pytest.mark.asyncio
    async def test_secret_changes_with_reset_time(self, unit_env: AsyncContainer):
        token_service = await unit_env.get(TokenService)
        password_hash = "ab" * 64
        first = datetime(2026, 1, 1, tzinfo=timezone.utc)
        second = datetime(2026, 1, 2, tzinfo=timezone.utc)

        never_reset = token_service.password_reset_secret(password_hash)
        reset_once = token_service.password_reset_secret(password_hash, first)
        reset_twice = token_service.password_reset_secret(password_hash, second)

        assert len({never_reset, reset_once, reset_twice}) == 3
        assert token_service.password_reset_secret(password_hash, first) == reset_once
