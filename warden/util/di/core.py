"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from warden.config import AuthSettings, BrokerSettings, RedisSettings, SMTPSettings, Settings
from warden.util.di.base import ProviderBase
from warden.util.error import ConfigurationError

PLACEHOLDER_PREFIX = "CHANGE_ME"


def check_secrets(settings: Settings) -> None:
    """Refuse to run production with placeholder secrets.

    Raises:
        ConfigurationError: If a secret still holds its placeholder value
    """
    if settings.environment != "production":
        return
    for name in ("jwt_secret", "password_salt_secret"):
        if getattr(settings.auth, name).startswith(PLACEHOLDER_PREFIX):
            raise ConfigurationError(
                f"AUTH__{name.upper()} must be set in production", setting=f"auth.{name}"
            )


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        settings = Settings()
        check_secrets(settings)
        return settings

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_redis_settings(self, settings: Settings) -> RedisSettings:
        """Provide Redis settings."""
        return settings.redis

    @provide(scope=Scope.APP)
    def provide_broker_settings(self, settings: Settings) -> BrokerSettings:
        """Provide message channel settings."""
        return settings.broker

    @provide(scope=Scope.APP)
    def provide_smtp_settings(self, settings: Settings) -> SMTPSettings:
        """Provide SMTP settings."""
        return settings.smtp
