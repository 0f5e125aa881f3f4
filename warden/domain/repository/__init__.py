"""Repository interfaces for the Warden domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from warden.domain.repository.authentication import AuthenticationRepository
from warden.domain.repository.event import EventRepository
from warden.domain.repository.key_value import KeyValueStore
from warden.domain.repository.transaction import Transaction, TransactionManager
from warden.domain.repository.user import UserRepository

__all__ = [
    "UserRepository",
    "AuthenticationRepository",
    "EventRepository",
    "KeyValueStore",
    "Transaction",
    "TransactionManager",
]
