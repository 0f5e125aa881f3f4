"""Domain layer DI providers."""

from dishka import Scope, provide

from warden.config import AuthSettings, RedisSettings
from warden.domain.repository import KeyValueStore, TransactionManager
from warden.domain.service import (
    AuthenticationService,
    EventBus,
    EventService,
    LocalStrategy,
    MessageChannel,
    OutboundEventForwarder,
    PasswordHasher,
    RevocationStore,
    TokenService,
    UserService,
)
from warden.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are APP-scoped: they hold no per-request state and open
    their own transactions through the transaction manager.
    """

    scope = Scope.APP

    @provide
    def get_password_hasher(self, auth_settings: AuthSettings) -> PasswordHasher:
        """Provide credential hasher."""
        return PasswordHasher(auth_settings=auth_settings)

    @provide
    def get_revocation_store(
        self, store: KeyValueStore, redis_settings: RedisSettings
    ) -> RevocationStore:
        """Provide revocation store."""
        return RevocationStore(store=store, redis_settings=redis_settings)

    @provide
    def get_token_service(
        self, auth_settings: AuthSettings, revocation_store: RevocationStore
    ) -> TokenService:
        """Provide token service."""
        return TokenService(auth_settings=auth_settings, revocation_store=revocation_store)

    @provide
    def get_event_bus(self, channel: MessageChannel) -> EventBus:
        """Provide in-process event bus forwarding outbound events to the channel."""
        bus = EventBus()
        OutboundEventForwarder(channel).register(bus)
        return bus

    @provide
    def get_event_service(
        self, transaction_manager: TransactionManager, event_bus: EventBus
    ) -> EventService:
        """Provide event recorder."""
        return EventService(transaction_manager=transaction_manager, event_bus=event_bus)

    @provide
    def get_user_service(self, transaction_manager: TransactionManager) -> UserService:
        """Provide user domain service."""
        return UserService(transaction_manager=transaction_manager)

    @provide
    def get_authentication_service(
        self,
        transaction_manager: TransactionManager,
        token_service: TokenService,
        auth_settings: AuthSettings,
    ) -> AuthenticationService:
        """Provide authentication domain service."""
        return AuthenticationService(
            transaction_manager=transaction_manager,
            token_service=token_service,
            auth_settings=auth_settings,
        )

    @provide
    def get_local_strategy(
        self,
        transaction_manager: TransactionManager,
        user_service: UserService,
        password_hasher: PasswordHasher,
    ) -> LocalStrategy:
        """Provide local credential strategy."""
        return LocalStrategy(
            transaction_manager=transaction_manager,
            user_service=user_service,
            password_hasher=password_hasher,
        )
