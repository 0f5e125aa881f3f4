"""Unit tests for SignOutUseCase."""

import pytest
from dishka import AsyncContainer

from warden.application.usecase.auth import SignOutUseCase
from warden.domain.error import InvalidTokenError
from warden.domain.repository import TransactionManager
from warden.domain.service import TokenService
from warden.domain.value import AuthProvider
from tests.conftest import load_user_records, sign_up_verified
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestSignOutUseCase:
    """Tests for SignOutUseCase."""

    @pytest.mark.asyncio
    async def test_revokes_access_token_and_clears_refresh_token(self, unit_env: AsyncContainer):
        # Arrange
        verified = await sign_up_verified(unit_env, "a@x.com", "Aa123456")
        token_service = await unit_env.get(TokenService)
        transaction_manager = await unit_env.get(TransactionManager)
        use_case = await unit_env.get(SignOutUseCase)
        payload = await token_service.authenticate(verified.access_token)

        # Act
        await use_case.execute(payload)

        # Assert
        assert await token_service.is_blacklisted(payload.jwti) is True
        with pytest.raises(InvalidTokenError):
            await token_service.authenticate(verified.access_token)

        _, records = await load_user_records(transaction_manager, "a@x.com")
        assert records[AuthProvider.LOCAL].refresh_token is None

    @pytest.mark.asyncio
    async def test_sign_out_twice_is_harmless(self, unit_env: AsyncContainer):
        verified = await sign_up_verified(unit_env, "a@x.com", "Aa123456")
        token_service = await unit_env.get(TokenService)
        use_case = await unit_env.get(SignOutUseCase)
        payload = await token_service.authenticate(verified.access_token)

        await use_case.execute(payload)
        await use_case.execute(payload)

        assert await token_service.is_blacklisted(payload.jwti) is True

    @pytest.mark.asyncio
    async def test_refresh_token_cannot_stand_in_for_access_token(self, unit_env: AsyncContainer):
        await sign_up_verified(unit_env, "a@x.com", "Aa123456")
        token_service = await unit_env.get(TokenService)
        transaction_manager = await unit_env.get(TransactionManager)
        _, records = await load_user_records(transaction_manager, "a@x.com")
        refresh_token = records[AuthProvider.LOCAL].refresh_token

        with pytest.raises(InvalidTokenError):
            await token_service.authenticate(refresh_token)
