"""PostgreSQL repository implementations."""

from warden.persistence.repository.authentication import PostgresAuthenticationRepository
from warden.persistence.repository.event import PostgresEventRepository
from warden.persistence.repository.transaction import (
    PostgresTransaction,
    PostgresTransactionManager,
)
from warden.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresUserRepository",
    "PostgresAuthenticationRepository",
    "PostgresEventRepository",
    "PostgresTransaction",
    "PostgresTransactionManager",
]
