"""In-memory user repository for testing."""

from datetime import datetime, timezone
from typing import Any, Optional

from warden.domain.error import ConflictError, UsernameTakenError
from warden.domain.model.user import User
from warden.domain.repository.user import UserRepository
from warden.domain.value import UserId

from .state import InMemoryState


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, state: Optional[InMemoryState] = None) -> None:
        self._state = state or InMemoryState()

    def _live(self) -> list[User]:
        return [user for user in self._state.users.values() if user.deleted_at is None]

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        user = self._state.users.get(user_id)
        return user if user and user.deleted_at is None else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        return next((user for user in self._live() if user.email == email), None)

    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by their username."""
        return next((user for user in self._live() if user.username == username), None)

    def _check_unique(self, user: User) -> None:
        for other in self._state.users.values():
            if other.id == user.id:
                continue
            if user.username is not None and other.username == user.username:
                raise UsernameTakenError(user.username)
            if other.email == user.email:
                raise ConflictError("Resource already exists")

    async def save(self, user: User) -> User:
        """Save or update a user."""
        self._check_unique(user)
        self._state.users[user.id] = user
        return user

    async def update_profile_fields(self, user_id: UserId, fields: dict[str, Any]) -> None:
        """Write profile fields onto a user."""
        user = self._state.users.get(user_id)
        if user is None or not fields:
            return
        await self.save(
            user.model_copy(update={**fields, "updated_at": datetime.now(timezone.utc)})
        )
