"""Application layer DI providers."""

from dishka import Scope, provide

from warden.application.consumer.email import EmailConsumer
from warden.application.usecase.auth import (
    FederatedSignInUseCase,
    LocalPasswordForgotUseCase,
    LocalPasswordResetUseCase,
    LocalSignInUseCase,
    LocalSignUpUseCase,
    LocalVerificationEmailUseCase,
    RefreshAccessTokenUseCase,
    RetrieveProfileUseCase,
    SignOutUseCase,
)
from warden.config import AuthSettings, Settings
from warden.domain.repository import TransactionManager
from warden.domain.service import (
    AuthenticationService,
    EmailTransport,
    EventService,
    PasswordHasher,
    TemplateRenderer,
    TokenService,
    UserService,
)
from warden.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Local auth use cases
    @provide(scope=Scope.REQUEST)
    def get_local_sign_up_use_case(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        password_hasher: PasswordHasher,
        event_service: EventService,
    ) -> LocalSignUpUseCase:
        """Provide local sign-up use case."""
        return LocalSignUpUseCase(
            transaction_manager=transaction_manager,
            user_service=user_service,
            password_hasher=password_hasher,
            event_service=event_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_local_verification_email_use_case(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        authentication_service: AuthenticationService,
        event_service: EventService,
    ) -> LocalVerificationEmailUseCase:
        """Provide local email verification use case."""
        return LocalVerificationEmailUseCase(
            transaction_manager=transaction_manager,
            token_service=token_service,
            authentication_service=authentication_service,
            event_service=event_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_local_sign_in_use_case(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
    ) -> LocalSignInUseCase:
        """Provide local sign-in use case."""
        return LocalSignInUseCase(
            transaction_manager=transaction_manager,
            authentication_service=authentication_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_local_password_forgot_use_case(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        event_service: EventService,
    ) -> LocalPasswordForgotUseCase:
        """Provide password forgot use case."""
        return LocalPasswordForgotUseCase(
            transaction_manager=transaction_manager,
            user_service=user_service,
            event_service=event_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_local_password_reset_use_case(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
        password_hasher: PasswordHasher,
        event_service: EventService,
    ) -> LocalPasswordResetUseCase:
        """Provide password reset use case."""
        return LocalPasswordResetUseCase(
            transaction_manager=transaction_manager,
            authentication_service=authentication_service,
            password_hasher=password_hasher,
            event_service=event_service,
        )

    # Session use cases
    @provide(scope=Scope.REQUEST)
    def get_sign_out_use_case(
        self, transaction_manager: TransactionManager, token_service: TokenService
    ) -> SignOutUseCase:
        """Provide sign-out use case."""
        return SignOutUseCase(
            transaction_manager=transaction_manager, token_service=token_service
        )

    @provide(scope=Scope.REQUEST)
    def get_refresh_access_token_use_case(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> RefreshAccessTokenUseCase:
        """Provide access token refresh use case."""
        return RefreshAccessTokenUseCase(
            transaction_manager=transaction_manager,
            token_service=token_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_federated_sign_in_use_case(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        authentication_service: AuthenticationService,
    ) -> FederatedSignInUseCase:
        """Provide federated sign-in use case."""
        return FederatedSignInUseCase(
            transaction_manager=transaction_manager,
            user_service=user_service,
            authentication_service=authentication_service,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_retrieve_profile_use_case(self, user_service: UserService) -> RetrieveProfileUseCase:
        """Provide retrieve profile use case."""
        return RetrieveProfileUseCase(user_service=user_service)

    # Consumers
    @provide(scope=Scope.APP)
    def get_email_consumer(
        self,
        transaction_manager: TransactionManager,
        authentication_service: AuthenticationService,
        event_service: EventService,
        email_transport: EmailTransport,
        template_renderer: TemplateRenderer,
        settings: Settings,
    ) -> EmailConsumer:
        """Provide outbound email consumer."""
        return EmailConsumer(
            transaction_manager=transaction_manager,
            authentication_service=authentication_service,
            event_service=event_service,
            email_transport=email_transport,
            template_renderer=template_renderer,
            settings=settings,
        )
