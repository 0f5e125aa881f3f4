"""Unit tests for LocalSignUpUseCase."""

import asyncio

import pydantic
import pytest
from dishka import AsyncContainer

from warden.adapter.messaging.inmemory import InMemoryMessageChannel
from warden.application.usecase.auth import LocalSignUpUseCase
from warden.application.usecase.auth.local_sign_up import LocalSignUpRequest
from warden.domain.error import AlreadySignedUpError, ConflictError, UsernameTakenError
from warden.domain.repository import TransactionManager
from warden.domain.service import MessageChannel, PasswordHasher
from warden.domain.value import AuthProvider, EventName
from tests.conftest import load_user_records, sign_up_verified
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestLocalSignUpUseCase:
    """Tests for LocalSignUpUseCase."""

    @pytest.mark.asyncio
    async def test_creates_pending_record_and_records_event(self, unit_env: AsyncContainer):
        # Arrange
        use_case = await unit_env.get(LocalSignUpUseCase)
        transaction_manager = await unit_env.get(TransactionManager)
        hasher = await unit_env.get(PasswordHasher)

        # Act
        response = await use_case.execute(
            LocalSignUpRequest(email="a@x.com", username="a", password="Aa123456")
        )

        # Assert
        user, records = await load_user_records(transaction_manager, "a@x.com")
        assert user is not None
        assert str(user.id) == response.user_id
        # Profile fields are held on the record until verification
        assert user.username is None

        local = records[AuthProvider.LOCAL]
        assert str(local.id) == response.authentication_id
        assert local.local.is_email_verified is False
        assert local.local.temporary_info.username == "a"
        assert local.local.password != "Aa123456"
        assert hasher.verify("Aa123456", local.local.password)

        async with transaction_manager.transaction() as tx:
            events = await tx.events.find_by_model_id(local.id)
        assert [e.event_name for e in events] == [EventName.AUTH_LOCAL_CREATED]
        assert events[0].model_id == local.id
        assert events[0].metadata.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_publishes_created_event_to_channel(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        channel = await unit_env.get(MessageChannel)
        assert isinstance(channel, InMemoryMessageChannel)

        response = await use_case.execute(
            LocalSignUpRequest(email="b@x.com", password="Aa123456")
        )

        assert len(channel.published) == 1
        pattern, payload = channel.published[0]
        assert pattern == EventName.AUTH_LOCAL_CREATED.value
        assert payload["model_id"] == response.authentication_id

    @pytest.mark.asyncio
    async def test_normalizes_email(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        transaction_manager = await unit_env.get(TransactionManager)

        await use_case.execute(LocalSignUpRequest(email="  Mixed@Case.COM ", password="Aa123456"))

        user, _ = await load_user_records(transaction_manager, "mixed@case.com")
        assert user is not None

    @pytest.mark.asyncio
    async def test_concurrent_sign_ups_with_same_username(self, unit_env: AsyncContainer):
        """Exactly one of two racing sign-ups gets the username."""
        use_case = await unit_env.get(LocalSignUpUseCase)

        results = await asyncio.gather(
            use_case.execute(
                LocalSignUpRequest(email="one@x.com", username="dupe", password="Aa123456")
            ),
            use_case.execute(
                LocalSignUpRequest(email="two@x.com", username="dupe", password="Aa123456")
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], UsernameTakenError)
        assert isinstance(failures[0], ConflictError)
        assert str(failures[0]) == "Username is already taken"

    @pytest.mark.asyncio
    async def test_rejects_username_of_verified_user(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        await sign_up_verified(unit_env, "owner@x.com", "Aa123456", username="taken")

        with pytest.raises(UsernameTakenError):
            await use_case.execute(
                LocalSignUpRequest(email="other@x.com", username="taken", password="Aa123456")
            )

    @pytest.mark.asyncio
    async def test_pending_sign_up_reports_pending_verification(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        await use_case.execute(LocalSignUpRequest(email="p@x.com", password="Aa123456"))

        with pytest.raises(AlreadySignedUpError) as exc_info:
            await use_case.execute(LocalSignUpRequest(email="p@x.com", password="Bb123456"))

        assert exc_info.value.is_email_verified is False
        assert "check your inbox" in str(exc_info.value)
        assert exc_info.value.kind == "conflict"

    @pytest.mark.asyncio
    async def test_verified_sign_up_asks_to_sign_in(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        await sign_up_verified(unit_env, "v@x.com", "Aa123456")

        with pytest.raises(AlreadySignedUpError) as exc_info:
            await use_case.execute(LocalSignUpRequest(email="v@x.com", password="Aa123456"))

        assert str(exc_info.value) == "User is already signed up. Please, sign in."

    @pytest.mark.asyncio
    async def test_failed_sign_up_leaves_no_state(self, unit_env: AsyncContainer):
        use_case = await unit_env.get(LocalSignUpUseCase)
        transaction_manager = await unit_env.get(TransactionManager)
        await use_case.execute(
            LocalSignUpRequest(email="first@x.com", username="same", password="Aa123456")
        )

        with pytest.raises(UsernameTakenError):
            await use_case.execute(
                LocalSignUpRequest(email="second@x.com", username="same", password="Aa123456")
            )

        user, _ = await load_user_records(transaction_manager, "second@x.com")
        assert user is None

    @pytest.mark.parametrize(
        "fields",
        [
            {"email": "no-at-sign", "password": "Aa123456"},
            {"email": "a@x.com", "password": "short"},
            {"email": "a@x.com", "password": "Aa123456", "username": ""},
        ],
    )
    def test_request_validation(self, fields):
        with pytest.raises(pydantic.ValidationError):
            LocalSignUpRequest(**fields)
