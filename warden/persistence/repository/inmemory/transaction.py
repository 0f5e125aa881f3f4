"""In-memory transaction manager for testing."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from warden.domain.repository.transaction import Transaction, TransactionManager

from .authentication import InMemoryAuthenticationRepository
from .event import InMemoryEventRepository
from .state import InMemoryState
from .user import InMemoryUserRepository


class InMemoryTransaction(Transaction):
    """Repositories over one working copy of the state."""

    def __init__(self, state: InMemoryState) -> None:
        self.state = state
        self.users = InMemoryUserRepository(state)
        self.authentications = InMemoryAuthenticationRepository(state)
        self.events = InMemoryEventRepository(state)


class InMemoryTransactionManager(TransactionManager):
    """Serializable transactions over an in-memory state.

    Transactions run one at a time. Writes go to a copy of the state that
    replaces the committed state only when the block exits normally.
    Transactions must not be nested.
    """

    def __init__(self, state: InMemoryState | None = None) -> None:
        self.state = state or InMemoryState()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        async with self._lock:
            working = self.state.copy()
            yield InMemoryTransaction(working)
            self.state = working
