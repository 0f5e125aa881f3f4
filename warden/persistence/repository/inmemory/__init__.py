"""In-memory repository implementations for testing."""

from .authentication import InMemoryAuthenticationRepository
from .event import InMemoryEventRepository
from .key_value import InMemoryKeyValueStore
from .state import InMemoryState
from .transaction import InMemoryTransaction, InMemoryTransactionManager
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAuthenticationRepository",
    "InMemoryEventRepository",
    "InMemoryKeyValueStore",
    "InMemoryState",
    "InMemoryTransaction",
    "InMemoryTransactionManager",
    "InMemoryUserRepository",
]
