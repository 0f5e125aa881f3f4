"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from warden.domain.model.user import User
from warden.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: The user's email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[User]:
        """Find a user by their username.

        Args:
            username: The user's username

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user

        Raises:
            UsernameTakenError: If the username belongs to another user
            ConflictError: If the email belongs to another user
        """
        pass

    @abstractmethod
    async def update_profile_fields(self, user_id: UserId, fields: dict[str, Any]) -> None:
        """Write profile fields (username, names, avatar) onto a user.

        Args:
            user_id: The user's unique identifier
            fields: Column values to set

        Raises:
            UsernameTakenError: If the username belongs to another user
        """
        pass
