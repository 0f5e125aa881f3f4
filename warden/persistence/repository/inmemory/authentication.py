"""In-memory authentication repository for testing."""

from datetime import datetime
from typing import Optional

from warden.domain.error import ConflictError, UsernameTakenError
from warden.domain.model.authentication import Authentication
from warden.domain.repository.authentication import AuthenticationRepository
from warden.domain.value import AuthenticationId, AuthProvider, UserId

from .state import InMemoryState


def _pending_username(authentication: Authentication) -> Optional[str]:
    if authentication.provider != AuthProvider.LOCAL or authentication.is_verified_local:
        return None
    info = authentication.local.temporary_info
    return info.username if info else None


class InMemoryAuthenticationRepository(AuthenticationRepository):
    """In-memory implementation of AuthenticationRepository for testing.

    Enforces the same uniqueness rules as the database: one record per
    (user, provider) and one pending sign-up per username.
    """

    def __init__(self, state: Optional[InMemoryState] = None) -> None:
        self._state = state or InMemoryState()

    async def find_by_id(self, authentication_id: AuthenticationId) -> Optional[Authentication]:
        """Find a record by ID."""
        return self._state.authentications.get(authentication_id)

    async def find_by_user_and_provider(
        self, user_id: UserId, provider: AuthProvider
    ) -> Optional[Authentication]:
        """Find the record binding a user to a provider."""
        for authentication in self._state.authentications.values():
            if authentication.user_id == user_id and authentication.provider == provider:
                return authentication
        return None

    async def find_all_by_user_id(self, user_id: UserId) -> list[Authentication]:
        """Get all records of a user, oldest first."""
        records = [a for a in self._state.authentications.values() if a.user_id == user_id]
        return sorted(records, key=lambda a: a.created_at)

    async def exists_pending_username(
        self, username: str, exclude_user_id: Optional[UserId] = None
    ) -> bool:
        """Check whether an unverified local record has reserved a username."""
        return any(
            _pending_username(a) == username and a.user_id != exclude_user_id
            for a in self._state.authentications.values()
        )

    async def save(self, authentication: Authentication) -> Authentication:
        """Save or update a record."""
        username = _pending_username(authentication)
        for other in self._state.authentications.values():
            if other.id == authentication.id:
                continue
            if other.user_id == authentication.user_id and other.provider == authentication.provider:
                raise ConflictError("Resource already exists")
            if username is not None and _pending_username(other) == username:
                raise UsernameTakenError(username)

        self._state.authentications[authentication.id] = authentication
        return authentication

    async def clear_refresh_tokens(
        self,
        user_id: UserId,
        accessed_at: datetime,
        exclude_provider: Optional[AuthProvider] = None,
    ) -> None:
        """Null out a user's refresh tokens and bump last access."""
        for authentication in list(self._state.authentications.values()):
            if authentication.user_id != user_id or authentication.provider == exclude_provider:
                continue
            self._state.authentications[authentication.id] = authentication.model_copy(
                update={"refresh_token": None, "last_accessed_at": accessed_at}
            )
