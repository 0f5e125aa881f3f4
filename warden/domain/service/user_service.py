"""User domain service."""

from typing import Optional

import logfire

from warden.domain.error import NotFoundError
from warden.domain.model.authentication import Principal
from warden.domain.model.user import User
from warden.domain.repository.transaction import Transaction, TransactionManager
from warden.domain.value import UserId

from .base import Service


class UserService(Service):
    """Domain service for user lookups."""

    def __init__(self, transaction_manager: TransactionManager) -> None:
        """Initialize user service.

        Args:
            transaction_manager: Transaction manager
        """
        self.transaction_manager = transaction_manager

    async def get_by_id(self, user_id: UserId) -> User:
        """Get a user by ID.

        Args:
            user_id: User ID

        Returns:
            The user

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            async with self.transaction_manager.transaction() as tx:
                user = await tx.users.find_by_id(user_id)

            if user is None:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_principal(
        self,
        tx: Transaction,
        *,
        email: Optional[str] = None,
        username: Optional[str] = None,
    ) -> Optional[Principal]:
        """Load a user by email or username together with its records.

        Args:
            tx: Open transaction
            email: Email address to match (takes precedence)
            username: Username to match

        Returns:
            The principal if the user exists, None otherwise
        """
        if email is not None:
            user = await tx.users.find_by_email(email.strip().lower())
        elif username is not None:
            user = await tx.users.find_by_username(username)
        else:
            return None

        if user is None:
            return None

        authentications = await tx.authentications.find_all_by_user_id(user.id)
        return Principal(user=user, authentications=authentications)

    async def is_username_taken(
        self,
        tx: Transaction,
        username: str,
        exclude_user_id: Optional[UserId] = None,
    ) -> bool:
        """Check whether ``username`` is held by another user.

        Pending local sign-ups reserve their username until verification,
        so both verified users and unverified records are checked.
        """
        owner = await tx.users.find_by_username(username)
        if owner is not None and owner.id != exclude_user_id:
            return True
        return await tx.authentications.exists_pending_username(username, exclude_user_id)
