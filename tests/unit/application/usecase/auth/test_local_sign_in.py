"""Unit tests for LocalStrategy and LocalSignInUseCase."""

import pytest
from dishka import AsyncContainer

from warden.application.usecase.auth import (
    FederatedSignInUseCase,
    LocalSignInUseCase,
    LocalSignUpUseCase,
)
from warden.application.usecase.auth.federated_sign_in import FederatedSignInRequest
from warden.application.usecase.auth.local_sign_in import LocalSignInRequest
from warden.application.usecase.auth.local_sign_up import LocalSignUpRequest
from warden.domain.error import UnauthorizedError
from warden.domain.model import Principal
from warden.domain.repository import TransactionManager
from warden.domain.service import LocalCredentials, LocalStrategy, TokenService
from warden.domain.value import AuthProvider, FederatedProfile
from tests.conftest import load_user_records, sign_up_verified
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLocalStrategy:
    """Tests for LocalStrategy."""

    @pytest.mark.asyncio
    async def test_accepts_email_or_username(self, unit_env: AsyncContainer):
        await sign_up_verified(unit_env, "a@x.com", "Aa123456", username="alice")
        strategy = await unit_env.get(LocalStrategy)

        by_email = await strategy.authenticate(LocalCredentials(login="a@x.com", password="Aa123456"))
        by_username = await strategy.authenticate(
            LocalCredentials(login="alice", password="Aa123456")
        )

        assert by_email.unwrap().user.email == "a@x.com"
        assert by_username.unwrap().user.id == by_email.unwrap().user.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "login,password",
        [
            ("a@x.com", "wrong-password"),
            ("nobody@x.com", "Aa123456"),
            ("nobody", "Aa123456"),
        ],
    )
    async def test_failures_share_one_error(
        self, unit_env: AsyncContainer, login: str, password: str
    ):
        await sign_up_verified(unit_env, "a@x.com", "Aa123456", username="alice")
        strategy = await unit_env.get(LocalStrategy)

        result = await strategy.authenticate(LocalCredentials(login=login, password=password))

        assert result.principal is None
        assert isinstance(result.error, UnauthorizedError)
        with pytest.raises(UnauthorizedError):
            result.unwrap()

    @pytest.mark.asyncio
    async def test_rejects_unverified_record(self, unit_env: AsyncContainer):
        sign_up = await unit_env.get(LocalSignUpUseCase)
        await sign_up.execute(LocalSignUpRequest(email="u@x.com", password="Aa123456"))
        strategy = await unit_env.get(LocalStrategy)

        result = await strategy.authenticate(LocalCredentials(login="u@x.com", password="Aa123456"))

        assert isinstance(result.error, UnauthorizedError)


class TestLocalSignInUseCase:
    """Tests for LocalSignInUseCase."""

    @pytest.mark.asyncio
    async def test_issues_tokens_and_stores_refresh_token(self, unit_env: AsyncContainer):
        # Arrange
        await sign_up_verified(unit_env, "a@x.com", "Aa123456")
        strategy = await unit_env.get(LocalStrategy)
        use_case = await unit_env.get(LocalSignInUseCase)
        token_service = await unit_env.get(TokenService)
        transaction_manager = await unit_env.get(TransactionManager)
        principal = (
            await strategy.authenticate(LocalCredentials(login="a@x.com", password="Aa123456"))
        ).unwrap()

        # Act
        response = await use_case.execute(LocalSignInRequest(principal=principal))

        # Assert
        access = await token_service.authenticate(response.access_token)
        refresh = token_service.verify(response.refresh_token)
        assert access.user_id == principal.user.id
        assert access.jwti is not None
        assert refresh.jwti is None

        _, records = await load_user_records(transaction_manager, "a@x.com")
        assert records[AuthProvider.LOCAL].refresh_token == response.refresh_token

    @pytest.mark.asyncio
    async def test_clears_sessions_of_other_providers(self, unit_env: AsyncContainer):
        # Arrange: the user holds a live google session
        await sign_up_verified(unit_env, "a@x.com", "Aa123456")
        federated = await unit_env.get(FederatedSignInUseCase)
        await federated.execute(
            FederatedSignInRequest(
                provider=AuthProvider.GOOGLE, profile=FederatedProfile(email="a@x.com")
            )
        )
        transaction_manager = await unit_env.get(TransactionManager)
        _, before = await load_user_records(transaction_manager, "a@x.com")
        assert before[AuthProvider.GOOGLE].refresh_token is not None

        strategy = await unit_env.get(LocalStrategy)
        use_case = await unit_env.get(LocalSignInUseCase)
        principal = (
            await strategy.authenticate(LocalCredentials(login="a@x.com", password="Aa123456"))
        ).unwrap()

        # Act
        await use_case.execute(LocalSignInRequest(principal=principal))

        # Assert
        _, after = await load_user_records(transaction_manager, "a@x.com")
        google = after[AuthProvider.GOOGLE]
        assert google.refresh_token is None
        assert google.last_accessed_at > before[AuthProvider.GOOGLE].last_accessed_at
        assert after[AuthProvider.LOCAL].refresh_token is not None

    @pytest.mark.asyncio
    async def test_rejects_principal_without_verified_record(self, unit_env: AsyncContainer):
        sign_up = await unit_env.get(LocalSignUpUseCase)
        await sign_up.execute(LocalSignUpRequest(email="u@x.com", password="Aa123456"))
        transaction_manager = await unit_env.get(TransactionManager)
        use_case = await unit_env.get(LocalSignInUseCase)

        async with transaction_manager.transaction() as tx:
            user = await tx.users.find_by_email("u@x.com")
            records = await tx.authentications.find_all_by_user_id(user.id)

        with pytest.raises(UnauthorizedError):
            await use_case.execute(
                LocalSignInRequest(principal=Principal(user=user, authentications=records))
            )
