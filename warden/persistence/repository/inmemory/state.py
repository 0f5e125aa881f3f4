"""Shared working set of the in-memory store."""

from dataclasses import dataclass, field
from datetime import datetime

from warden.domain.model import Authentication, BaseEvent, User
from warden.domain.value import AuthenticationId, EventId, UserId


@dataclass
class InMemoryState:
    """Rows of every in-memory table.

    Models are immutable, so a shallow copy of the containers is a full
    snapshot.
    """

    users: dict[UserId, User] = field(default_factory=dict)
    authentications: dict[AuthenticationId, Authentication] = field(default_factory=dict)
    events: list[BaseEvent] = field(default_factory=list)
    dispatched: dict[EventId, datetime] = field(default_factory=dict)

    def copy(self) -> "InMemoryState":
        return InMemoryState(
            users=dict(self.users),
            authentications=dict(self.authentications),
            events=list(self.events),
            dispatched=dict(self.dispatched),
        )
