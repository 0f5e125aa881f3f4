"""Authentication record repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from warden.domain.model.authentication import Authentication
from warden.domain.value import AuthenticationId, AuthProvider, UserId


class AuthenticationRepository(ABC):
    """Repository for Authentication records.

    At most one record exists per (user, provider); implementations enforce
    it with a uniqueness constraint.
    """

    @abstractmethod
    async def find_by_id(self, authentication_id: AuthenticationId) -> Optional[Authentication]:
        """Find a record by ID.

        Args:
            authentication_id: The record's unique identifier

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_provider(
        self, user_id: UserId, provider: AuthProvider
    ) -> Optional[Authentication]:
        """Find the record binding ``user_id`` to ``provider``.

        Args:
            user_id: The user's unique identifier
            provider: The authentication provider

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[Authentication]:
        """Get all records of a user, oldest first.

        Args:
            user_id: The user's unique identifier

        Returns:
            List of records (may be empty)
        """
        pass

    @abstractmethod
    async def exists_pending_username(
        self, username: str, exclude_user_id: Optional[UserId] = None
    ) -> bool:
        """Check whether an unverified local record has reserved ``username``.

        Args:
            username: Username held in a pending record's temporary info
            exclude_user_id: Ignore records of this user

        Returns:
            True if another pending sign-up holds the username
        """
        pass

    @abstractmethod
    async def save(self, authentication: Authentication) -> Authentication:
        """Save a record (create or update).

        Args:
            authentication: The record to save

        Returns:
            The saved record

        Raises:
            ConflictError: If the user already has a record for the provider
            UsernameTakenError: If a pending sign-up already holds the username
        """
        pass

    @abstractmethod
    async def clear_refresh_tokens(
        self,
        user_id: UserId,
        accessed_at: datetime,
        exclude_provider: Optional[AuthProvider] = None,
    ) -> None:
        """Null out refresh tokens of a user's records and bump last access.

        Args:
            user_id: The user's unique identifier
            accessed_at: New ``last_accessed_at`` for the touched records
            exclude_provider: Leave the record of this provider untouched
        """
        pass
