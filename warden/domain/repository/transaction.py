"""Transaction manager interface.

Multi-row mutations run inside one ``Transaction``: the repositories it
exposes share a single atomic unit that commits when the block exits
normally and rolls back when it raises.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Awaitable, Callable, TypeVar

from warden.domain.repository.authentication import AuthenticationRepository
from warden.domain.repository.event import EventRepository
from warden.domain.repository.user import UserRepository

T = TypeVar("T")


class Transaction(ABC):
    """Repositories bound to one open transaction."""

    users: UserRepository
    authentications: AuthenticationRepository
    events: EventRepository


class TransactionManager(ABC):
    """Opens transactions against the relational store."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[Transaction]:
        """Open a transaction.

        Usage:
            async with transaction_manager.transaction() as tx:
                user = await tx.users.find_by_email(email)
                ...

        Returns:
            Async context manager yielding the transaction
        """
        pass

    async def run_in_transaction(self, fn: Callable[[Transaction], Awaitable[T]]) -> T:
        """Run ``fn`` inside a new transaction and return its result.

        Args:
            fn: Coroutine function receiving the open transaction

        Returns:
            Whatever ``fn`` returns, after commit
        """
        async with self.transaction() as tx:
            return await fn(tx)
