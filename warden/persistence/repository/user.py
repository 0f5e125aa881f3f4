"""PostgreSQL implementation of User repository."""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import User
from warden.domain.repository import UserRepository
from warden.domain.value import UserId
from warden.persistence.mappers import row_to_user, user_to_dict
from warden.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _find_one(self, *criteria: Any) -> Optional[User]:
        stmt = select(users_table).where(*criteria, users_table.c.deleted_at.is_(None))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return await self._find_one(users_table.c.id == user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        return await self._find_one(users_table.c.email == email)

    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by their username."""
        return await self._find_one(users_table.c.username == username)

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user
        """
        # Check if user exists
        existing = await self.find_by_id(user.id)

        user_dict = user_to_dict(user)

        if existing:
            stmt = (
                users_table.update()
                .where(users_table.c.id == user.id)
                .values(**user_dict)
            )
        else:
            stmt = users_table.insert().values(**user_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return user

    async def update_profile_fields(self, user_id: UserId, fields: dict[str, Any]) -> None:
        """Write profile fields onto a user.

        Args:
            user_id: User ID to update
            fields: Column values to set
        """
        if not fields:
            return

        stmt = (
            users_table.update()
            .where(users_table.c.id == user_id)
            .values(**fields, updated_at=datetime.now(timezone.utc))
        )
        await self.session.execute(stmt)
        await self.session.flush()
