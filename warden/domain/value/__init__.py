"""Domain value objects for Warden."""

from warden.domain.value.identifiers import AuthenticationId, EventId, UserId
from warden.domain.value.types import (
    AuthProvider,
    EventName,
    FederatedProfile,
    TokenPair,
    TokenPayload,
    TokenType,
)

__all__ = [
    # Identifiers
    "UserId",
    "AuthenticationId",
    "EventId",
    # Types
    "AuthProvider",
    "EventName",
    "FederatedProfile",
    "TokenPair",
    "TokenPayload",
    "TokenType",
]
