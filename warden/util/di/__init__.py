"""Dependency injection module."""

from typing import Type

from warden.util.di.adapter import ProdAdapterProvider
from warden.util.di.application import ProdApplicationProvider
from warden.util.di.base import Component, ProviderBase
from warden.util.di.core import ProdConfigProvider
from warden.util.di.domain import ProdDomainProvider
from warden.util.di.infrastructure import (
    BrokerProvider,
    CacheProvider,
    EmailProvider,
    PersistenceProvider,
    ProdBrokerProvider,
    ProdCacheProvider,
    ProdEmailProvider,
    ProdPersistenceProvider,
)
from warden.util.error import DependencyInjectionError

# Single list - all providers treated uniformly
PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdAdapterProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    PersistenceProvider,
    CacheProvider,
    BrokerProvider,
    EmailProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Get appropriate provider class.

    Automatically determines if provider is mockable by checking for subclasses.

    - No subclasses: Concrete provider, use directly
    - Has subclasses: Mockable component, select by __is_mock__ flag

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If requested implementation not found
    """
    subclasses = base.__subclasses__()

    if not subclasses:
        # Concrete provider - no implementations, use as-is
        return base

    # Has subclasses - it's a mockable component
    impl = next(
        (c for c in subclasses if getattr(c, "__is_mock__", False) == use_mock),
        None,
    )

    if not impl:
        kind = "mock" if use_mock else "production"
        component_name = getattr(base, "__mock_component__", base.__name__)
        raise DependencyInjectionError(f"No {kind} implementation for {component_name}")

    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    # Core providers
    "ProdConfigProvider",
    "ProdAdapterProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    # Infrastructure base classes
    "BrokerProvider",
    "CacheProvider",
    "EmailProvider",
    "PersistenceProvider",
    # Infrastructure implementations
    "ProdBrokerProvider",
    "ProdCacheProvider",
    "ProdEmailProvider",
    "ProdPersistenceProvider",
]
