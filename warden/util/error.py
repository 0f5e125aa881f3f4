"""Errors raised while wiring the service together."""


class UtilError(Exception):
    """Base error for configuration and container setup."""


class ConfigurationError(UtilError):
    """Settings are missing or unsafe for the current environment.

    Raised at startup, before any provider hands out a service.
    """

    def __init__(self, message: str, setting: str | None = None):
        super().__init__(message)
        self.setting = setting


class DependencyInjectionError(UtilError):
    """A container component has no implementation for the requested mode."""
