"""Domain events.

A closed set of immutable facts keyed by ``EventName``. Each name has one
payload shape; ``build_event`` turns (name, args) into the matching variant
and ``domain_event_adapter`` parses stored rows and queue messages back.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID, uuid4

import pydantic
from pydantic import ConfigDict, Field, TypeAdapter

from warden.domain.model.common import DomainModel
from warden.domain.value import EventId, EventName, UserId


class EventMetadata(DomainModel):
    """Base for event payloads. Unknown fields are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class EmptyMetadata(EventMetadata):
    """Payload of events that carry no extra data."""


class LocalCreatedMetadata(EventMetadata):
    """Profile captured at sign-up, needed to address the verification email."""

    email: str
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None


class EmailMetadata(EventMetadata):
    """Recipient of an email that was sent."""

    email: str


class PasswordResetMetadata(EventMetadata):
    """Recipient of a password reset email."""

    email: str
    username: Optional[str] = None


class BaseEvent(DomainModel):
    """Fields shared by every event.

    ``model_id`` is the authentication record the fact concerns.
    """

    id: EventId = Field(default_factory=lambda: EventId(uuid4()))
    user_id: UserId
    model_id: UUID
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_name(self) -> EventName:
        return EventName(getattr(self, "name"))


class AuthLocalCreatedEvent(BaseEvent):
    name: Literal["auth.local.created"] = "auth.local.created"
    metadata: LocalCreatedMetadata


class AuthLocalEmailVerificationSentEvent(BaseEvent):
    name: Literal["auth.local.email-verification.sent"] = (
        "auth.local.email-verification.sent"
    )
    metadata: EmailMetadata


class AuthLocalEmailVerificationVerifiedEvent(BaseEvent):
    name: Literal["auth.local.email-verification.verified"] = (
        "auth.local.email-verification.verified"
    )
    metadata: EmptyMetadata = Field(default_factory=EmptyMetadata)


class AuthLocalPasswordResetEvent(BaseEvent):
    name: Literal["auth.local.password-reset"] = "auth.local.password-reset"
    metadata: PasswordResetMetadata


class AuthLocalPasswordResetSentEvent(BaseEvent):
    name: Literal["auth.local.password-reset.sent"] = "auth.local.password-reset.sent"
    metadata: EmailMetadata


class AuthLocalPasswordResetedEvent(BaseEvent):
    name: Literal["auth.local.password-reset.reseted"] = (
        "auth.local.password-reset.reseted"
    )
    metadata: EmptyMetadata = Field(default_factory=EmptyMetadata)


DomainEvent = Annotated[
    Union[
        AuthLocalCreatedEvent,
        AuthLocalEmailVerificationSentEvent,
        AuthLocalEmailVerificationVerifiedEvent,
        AuthLocalPasswordResetEvent,
        AuthLocalPasswordResetSentEvent,
        AuthLocalPasswordResetedEvent,
    ],
    Field(discriminator="name"),
]

EVENT_REGISTRY: dict[EventName, type[BaseEvent]] = {
    EventName.AUTH_LOCAL_CREATED: AuthLocalCreatedEvent,
    EventName.AUTH_LOCAL_EMAIL_VERIFICATION_SENT: AuthLocalEmailVerificationSentEvent,
    EventName.AUTH_LOCAL_EMAIL_VERIFICATION_VERIFIED: AuthLocalEmailVerificationVerifiedEvent,
    EventName.AUTH_LOCAL_PASSWORD_RESET: AuthLocalPasswordResetEvent,
    EventName.AUTH_LOCAL_PASSWORD_RESET_SENT: AuthLocalPasswordResetSentEvent,
    EventName.AUTH_LOCAL_PASSWORD_RESETED: AuthLocalPasswordResetedEvent,
}

domain_event_adapter: TypeAdapter[DomainEvent] = TypeAdapter(DomainEvent)


def build_event(
    name: EventName,
    user_id: UserId,
    model_id: UUID,
    metadata: Optional[dict[str, Any]] = None,
) -> BaseEvent:
    """Construct the event variant registered for ``name``.

    Args:
        name: Event name
        user_id: Actor the event belongs to
        model_id: Authentication record the event concerns
        metadata: Payload matching the variant's shape

    Returns:
        The event instance

    Raises:
        TypeError: If ``name`` is unknown or the payload does not fit the variant
    """
    event_class = EVENT_REGISTRY.get(name)
    if event_class is None:
        raise TypeError(f"Unknown event name: {name!r}")

    try:
        return event_class(user_id=user_id, model_id=model_id, metadata=metadata or {})
    except pydantic.ValidationError as e:
        raise TypeError(f"Invalid payload for event {name.value}: {e}") from e


def parse_event(data: dict[str, Any]) -> BaseEvent:
    """Parse a stored row or message payload into its event variant."""
    return domain_event_adapter.validate_python(data)
