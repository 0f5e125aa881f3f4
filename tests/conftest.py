"""Test configuration and fixtures."""

import logfire
from dishka import AsyncContainer

from warden.application.usecase.auth import LocalSignUpUseCase, LocalVerificationEmailUseCase
from warden.application.usecase.auth.local_sign_up import LocalSignUpRequest
from warden.application.usecase.auth.local_verification_email import (
    LocalVerificationEmailRequest,
    LocalVerificationEmailResponse,
)
from warden.domain.model import Authentication, User
from warden.domain.repository import TransactionManager
from warden.domain.service import AuthenticationService
from warden.domain.value import AuthProvider

# Keep test output quiet and local
logfire.configure(send_to_logfire=False, console=False)


async def load_user_records(
    transaction_manager: TransactionManager, email: str
) -> tuple[User | None, dict[AuthProvider, Authentication]]:
    """Helper returning a user and its records keyed by provider.

    Args:
        transaction_manager: Transaction manager to read through
        email: Email of the user

    Returns:
        The user (or None) and its authentication records
    """
    async with transaction_manager.transaction() as tx:
        user = await tx.users.find_by_email(email)
        if user is None:
            return None, {}
        records = await tx.authentications.find_all_by_user_id(user.id)
    return user, {record.provider: record for record in records}


async def sign_up_verified(
    container: AsyncContainer, email: str, password: str, username: str | None = None
) -> LocalVerificationEmailResponse:
    """Helper signing up a local user and confirming the email.

    Args:
        container: Request container
        email: Email address
        password: Plaintext password
        username: Optional username

    Returns:
        The verification response (holds the first access token)
    """
    sign_up = await container.get(LocalSignUpUseCase)
    await sign_up.execute(LocalSignUpRequest(email=email, password=password, username=username))

    transaction_manager = await container.get(TransactionManager)
    _, records = await load_user_records(transaction_manager, email.lower())
    authentication_service = await container.get(AuthenticationService)
    token = authentication_service.create_verification_token(records[AuthProvider.LOCAL])

    verify = await container.get(LocalVerificationEmailUseCase)
    return await verify.execute(LocalVerificationEmailRequest(token=token))
