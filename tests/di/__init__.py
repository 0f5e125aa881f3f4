"""Mock providers for testing."""

from .broker import MockBrokerProvider
from .cache import MockCacheProvider
from .email import MockEmailProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockBrokerProvider",
    "MockCacheProvider",
    "MockEmailProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
