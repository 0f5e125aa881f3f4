"""Federated (OAuth2/SAML) sign-in use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel

from warden.domain.error import ValidationError
from warden.domain.model import AuthMetadata, Authentication, User
from warden.domain.repository import TransactionManager
from warden.domain.service import AuthenticationService, UserService
from warden.domain.value import AuthenticationId, AuthProvider, FederatedProfile, UserId


class FederatedSignInRequest(BaseModel):
    """Profile produced by a provider adapter after its handshake."""

    provider: AuthProvider
    profile: FederatedProfile


class FederatedSignInResponse(BaseModel):
    """Federated sign-in response."""

    access_token: str
    refresh_token: str
    user_id: str
    is_new_user: bool


class FederatedSignInUseCase:
    """Use case for signing in with an external provider.

    The user is matched by email, else by username. First use creates the
    user and the provider record.
    """

    def __init__(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        authentication_service: AuthenticationService,
    ) -> None:
        self.transaction_manager = transaction_manager
        self.user_service = user_service
        self.authentication_service = authentication_service

    async def execute(self, request: FederatedSignInRequest) -> FederatedSignInResponse:
        """Bind the provider to the user and start a session.

        Raises:
            ValidationError: If the provider is local or the profile cannot
                identify a user
        """
        provider, profile = request.provider, request.profile
        if provider == AuthProvider.LOCAL:
            raise ValidationError("Local provider cannot be used for federated sign-in")
        if not profile.email and not profile.username:
            raise ValidationError("Federated profile needs an email or a username")

        with logfire.span("federated_sign_in", provider=provider.value):
            async with self.transaction_manager.transaction() as tx:
                principal = await self.user_service.find_principal(
                    tx, email=profile.email, username=None if profile.email else profile.username
                )

                if principal is None:
                    if not profile.email:
                        raise ValidationError("Federated profile without email cannot create a user")

                    username = profile.username
                    if username and await self.user_service.is_username_taken(tx, username):
                        logfire.info("Provider username taken, leaving it unset", provider=provider.value)
                        username = None

                    user = await tx.users.save(
                        User(
                            id=UserId(uuid4()),
                            email=profile.email,
                            username=username,
                            first_name=profile.first_name,
                            last_name=profile.last_name,
                            avatar_url=profile.avatar_url,
                        )
                    )
                    authentication = None
                else:
                    user = principal.user
                    authentication = principal.find(provider)

                metadata = AuthMetadata(**{provider.value: profile.provider_data})
                if authentication is None:
                    authentication = Authentication(
                        id=AuthenticationId(uuid4()),
                        user_id=user.id,
                        provider=provider,
                        metadata=metadata,
                    )
                else:
                    authentication = authentication.model_copy(update={"metadata": metadata})

                _, pair = await self.authentication_service.establish_session(tx, authentication)

            logfire.info(
                "Federated sign-in",
                user_id=str(user.id),
                provider=provider.value,
                is_new_user=principal is None,
            )
            return FederatedSignInResponse(
                access_token=pair.access_token,
                refresh_token=pair.refresh_token,
                user_id=str(user.id),
                is_new_user=principal is None,
            )
