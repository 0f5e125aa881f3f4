"""PostgreSQL implementation of Authentication repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import Authentication
from warden.domain.repository import AuthenticationRepository
from warden.domain.value import AuthenticationId, AuthProvider, UserId
from warden.persistence.mappers import authentication_to_dict, row_to_authentication
from warden.persistence.tables import (
    EMAIL_VERIFIED_PATH,
    PENDING_USERNAME_PATH,
    authentications_table,
)


class PostgresAuthenticationRepository(AuthenticationRepository):
    """PostgreSQL implementation of AuthenticationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, authentication_id: AuthenticationId) -> Optional[Authentication]:
        """Find a record by ID."""
        stmt = select(authentications_table).where(authentications_table.c.id == authentication_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_authentication(dict(row)) if row else None

    async def find_by_user_and_provider(
        self, user_id: UserId, provider: AuthProvider
    ) -> Optional[Authentication]:
        """Find the record binding a user to a provider."""
        stmt = (
            select(authentications_table)
            .where(authentications_table.c.user_id == user_id)
            .where(authentications_table.c.provider == provider.value)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_authentication(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[Authentication]:
        """Get all records of a user, oldest first."""
        stmt = (
            select(authentications_table)
            .where(authentications_table.c.user_id == user_id)
            .order_by(authentications_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_authentication(dict(row)) for row in result.mappings().all()]

    async def exists_pending_username(
        self, username: str, exclude_user_id: Optional[UserId] = None
    ) -> bool:
        """Check whether an unverified local record has reserved a username.

        Args:
            username: Username to look for
            exclude_user_id: Ignore records of this user

        Returns:
            True if another pending sign-up holds the username
        """
        metadata_column = authentications_table.c["metadata"]
        stmt = (
            select(authentications_table.c.id)
            .where(authentications_table.c.provider == AuthProvider.LOCAL.value)
            .where(metadata_column[PENDING_USERNAME_PATH].astext == username)
            .where(metadata_column[EMAIL_VERIFIED_PATH].astext == "false")
            .limit(1)
        )
        if exclude_user_id is not None:
            stmt = stmt.where(authentications_table.c.user_id != exclude_user_id)

        result = await self.session.execute(stmt)
        return result.first() is not None

    async def save(self, authentication: Authentication) -> Authentication:
        """Save a record (create or update).

        Args:
            authentication: Record to save

        Returns:
            Saved record
        """
        existing = await self.find_by_id(authentication.id)

        values = authentication_to_dict(authentication)

        if existing:
            stmt = (
                authentications_table.update()
                .where(authentications_table.c.id == authentication.id)
                .values(**values)
            )
        else:
            stmt = authentications_table.insert().values(**values)

        await self.session.execute(stmt)
        await self.session.flush()
        return authentication

    async def clear_refresh_tokens(
        self,
        user_id: UserId,
        accessed_at: datetime,
        exclude_provider: Optional[AuthProvider] = None,
    ) -> None:
        """Null out a user's refresh tokens and bump last access.

        Args:
            user_id: User ID
            accessed_at: New last access time
            exclude_provider: Provider whose record is left untouched
        """
        stmt = (
            authentications_table.update()
            .where(authentications_table.c.user_id == user_id)
            .values(refresh_token=None, last_accessed_at=accessed_at)
        )
        if exclude_provider is not None:
            stmt = stmt.where(authentications_table.c.provider != exclude_provider.value)

        await self.session.execute(stmt)
        await self.session.flush()
