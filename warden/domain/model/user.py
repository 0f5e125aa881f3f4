"""User aggregate root.

Owned by the user-management side; the authentication core reads it and
writes profile fields back when a local sign-up is verified.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from warden.domain.model.common import DomainModel
from warden.domain.value import UserId


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(DomainModel):
    """User aggregate root - provider-agnostic.

    A user can hold one authentication record per provider. The records are
    never stored on the user; they are loaded by query (see ``Principal``).
    """

    id: UserId
    email: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    deleted_at: Optional[datetime] = None
