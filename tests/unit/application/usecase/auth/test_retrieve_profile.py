"""Unit tests for RetrieveProfileUseCase."""

from uuid import uuid4

import pytest
from dishka import AsyncContainer

from warden.application.usecase.auth import RetrieveProfileUseCase
from warden.domain.error import NotFoundError
from warden.domain.service import TokenService
from warden.domain.value import UserId
from tests.conftest import sign_up_verified
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestRetrieveProfileUseCase:
    """Tests for RetrieveProfileUseCase."""

    @pytest.mark.asyncio
    async def test_returns_profile_of_token_user(self, unit_env: AsyncContainer):
        verified = await sign_up_verified(unit_env, "a@x.com", "Aa123456", username="alice")
        token_service = await unit_env.get(TokenService)
        use_case = await unit_env.get(RetrieveProfileUseCase)
        payload = await token_service.authenticate(verified.access_token)

        profile = await use_case.execute(payload.user_id)

        assert profile.id == str(payload.user_id)
        assert profile.email == "a@x.com"
        assert profile.username == "alice"

    @pytest.mark.asyncio
    async def test_unknown_user(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(RetrieveProfileUseCase)

        with pytest.raises(NotFoundError) as exc_info:
            await use_case.execute(UserId(uuid4()))

        assert exc_info.value.kind == "not_found"
