"""Domain value objects for Warden.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator

from warden.domain.value.common import ValueObject


class AuthProvider(str, Enum):
    """Supported authentication providers."""

    LOCAL = "local"
    GOOGLE = "google"
    KEYCLOAK = "keycloak"
    GITHUB = "github"


class EventName(str, Enum):
    """Names of the domain events recorded by the authentication core."""

    AUTH_LOCAL_CREATED = "auth.local.created"
    AUTH_LOCAL_EMAIL_VERIFICATION_SENT = "auth.local.email-verification.sent"
    AUTH_LOCAL_EMAIL_VERIFICATION_VERIFIED = "auth.local.email-verification.verified"
    AUTH_LOCAL_PASSWORD_RESET = "auth.local.password-reset"
    AUTH_LOCAL_PASSWORD_RESET_SENT = "auth.local.password-reset.sent"
    AUTH_LOCAL_PASSWORD_RESETED = "auth.local.password-reset.reseted"


class TokenType(str, Enum):
    """What a signed token may be used for (the ``typ`` claim)."""

    ACCESS = "access"
    REFRESH = "refresh"
    VERIFICATION = "verification"
    PASSWORD_RESET = "password_reset"


class TokenPayload(ValueObject):
    """Claims carried inside a signed token.

    ``jwti`` is present only on access tokens; verification, password reset
    and refresh tokens are issued without one.
    """

    user_id: UUID
    provider: AuthProvider
    typ: TokenType
    jwti: str | None = None
    iat: int
    exp: int


class TokenPair(ValueObject):
    """Freshly issued access and refresh tokens."""

    access_token: str
    refresh_token: str
    jwti: str


class FederatedProfile(ValueObject):
    """Normalized profile produced by an OAuth2/SAML provider adapter.

    At least one of ``email`` or ``username`` must be present.
    """

    email: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
    provider_data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        """Lowercase and strip the email address."""
        return v.strip().lower() if v else v
