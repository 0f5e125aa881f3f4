"""Authentication record entity.

One row per (user, provider) credential binding.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field, model_validator

from warden.domain.model.common import DomainModel
from warden.domain.model.user import User
from warden.domain.value import AuthenticationId, AuthProvider, UserId


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TemporaryInfo(DomainModel):
    """Profile fields held on a pending local record until verification."""

    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None

    def profile_fields(self) -> dict[str, Any]:
        """Fields to copy onto the user, skipping unset values."""
        return {k: v for k, v in self.model_dump().items() if v is not None}


class LocalMetadata(DomainModel):
    """Credential and verification sub-state of a local record."""

    is_email_verified: bool = False
    password: str  # Hex-encoded hash, never plaintext
    verification_sent_at: Optional[datetime] = None
    verification_confirmed_at: Optional[datetime] = None
    password_changed_at: Optional[datetime] = None  # Set by every password reset
    temporary_info: Optional[TemporaryInfo] = None
    callback_url: Optional[str] = None  # Last issued verification/reset link


class AuthMetadata(DomainModel):
    """Provider-shaped metadata. Only the key matching the provider is set."""

    local: Optional[LocalMetadata] = None
    google: Optional[dict[str, Any]] = None
    keycloak: Optional[dict[str, Any]] = None
    github: Optional[dict[str, Any]] = None


class Authentication(DomainModel):
    """Provider-specific credential binding for one user.

    ``refresh_token`` is set only while a session is active for the
    provider. ``last_accessed_at`` moves on every sign-in, verification and
    refresh.
    """

    id: AuthenticationId
    user_id: UserId
    provider: AuthProvider
    refresh_token: Optional[str] = None
    metadata: AuthMetadata = Field(default_factory=AuthMetadata)
    created_at: datetime = Field(default_factory=_now)
    last_accessed_at: datetime = Field(default_factory=_now)

    @model_validator(mode="after")
    def local_metadata_required(self) -> "Authentication":
        """A local record always carries its credential sub-state."""
        if self.provider == AuthProvider.LOCAL and self.metadata.local is None:
            raise ValueError("Local authentication requires metadata.local")
        return self

    @property
    def local(self) -> LocalMetadata:
        """Local sub-state (only valid for provider=local)."""
        if self.metadata.local is None:
            raise ValueError(f"{self.provider.value} authentication has no local metadata")
        return self.metadata.local

    @property
    def is_verified_local(self) -> bool:
        """True for a local record whose email address is verified."""
        return (
            self.provider == AuthProvider.LOCAL
            and self.metadata.local is not None
            and self.metadata.local.is_email_verified
        )

    def with_local(self, **changes: Any) -> "Authentication":
        """Copy with the local sub-state updated."""
        local = self.local.model_copy(update=changes)
        return self.model_copy(
            update={"metadata": self.metadata.model_copy(update={"local": local})}
        )


class Principal(DomainModel):
    """A user together with its authentication records, loaded by query."""

    user: User
    authentications: list[Authentication] = Field(default_factory=list)

    def find(self, provider: AuthProvider) -> Optional[Authentication]:
        """Return the record for ``provider`` if loaded."""
        return next((a for a in self.authentications if a.provider == provider), None)
