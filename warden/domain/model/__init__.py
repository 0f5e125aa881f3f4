"""Domain model entities for Warden."""

from warden.domain.model.authentication import (
    AuthMetadata,
    Authentication,
    LocalMetadata,
    Principal,
    TemporaryInfo,
)
from warden.domain.model.event import (
    BaseEvent,
    DomainEvent,
    build_event,
    parse_event,
)
from warden.domain.model.user import User

__all__ = [
    "User",
    "Authentication",
    "AuthMetadata",
    "LocalMetadata",
    "TemporaryInfo",
    "Principal",
    "BaseEvent",
    "DomainEvent",
    "build_event",
    "parse_event",
]
