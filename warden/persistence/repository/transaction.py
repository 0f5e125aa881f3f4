"""PostgreSQL transaction manager."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import logfire
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from warden.domain.error import ConflictError, InternalError, UsernameTakenError
from warden.domain.repository import Transaction, TransactionManager
from warden.persistence.repository.authentication import PostgresAuthenticationRepository
from warden.persistence.repository.event import PostgresEventRepository
from warden.persistence.repository.user import PostgresUserRepository
from warden.persistence.tables import USERNAME_CONSTRAINTS


class PostgresTransaction(Transaction):
    """Repositories sharing one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = PostgresUserRepository(session)
        self.authentications = PostgresAuthenticationRepository(session)
        self.events = PostgresEventRepository(session)


def translate_integrity_error(error: IntegrityError) -> ConflictError:
    """Map a unique-constraint violation onto the matching domain error."""
    message = str(error.orig)
    if any(constraint in message for constraint in USERNAME_CONSTRAINTS):
        return UsernameTakenError()
    return ConflictError("Resource already exists")


class PostgresTransactionManager(TransactionManager):
    """Opens one session per transaction.

    The session commits when the block exits normally and rolls back when it
    raises. Constraint violations surface as ``ConflictError`` and other
    database failures as ``InternalError``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize transaction manager.

        Args:
            session_factory: Session factory bound to the engine
        """
        self.session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    yield PostgresTransaction(session)
            except IntegrityError as e:
                logfire.warn("Transaction rolled back on constraint violation", error=str(e.orig))
                raise translate_integrity_error(e) from e
            except SQLAlchemyError as e:
                logfire.error("Transaction failed", error=str(e))
                raise InternalError("Transaction failed") from e
