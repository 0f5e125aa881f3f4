"""In-memory event repository for testing."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from warden.domain.model.event import BaseEvent
from warden.domain.repository.event import EventRepository
from warden.domain.value import EventId, EventName

from .state import InMemoryState


class InMemoryEventRepository(EventRepository):
    """In-memory implementation of EventRepository for testing."""

    def __init__(self, state: Optional[InMemoryState] = None) -> None:
        self._state = state or InMemoryState()

    async def save(self, event: BaseEvent) -> BaseEvent:
        """Append an event."""
        self._state.events.append(event)
        return event

    async def find_by_model_id(self, model_id: UUID) -> list[BaseEvent]:
        """Get all events concerning a record, oldest first."""
        return [event for event in self._state.events if event.model_id == model_id]

    async def find_undispatched(
        self, names: set[EventName], limit: int = 100
    ) -> list[BaseEvent]:
        """Get events never dispatched, oldest first."""
        pending = [
            event
            for event in self._state.events
            if event.id not in self._state.dispatched and event.event_name in names
        ]
        return pending[:limit]

    async def mark_dispatched(self, event_id: EventId, dispatched_at: datetime) -> None:
        """Stamp an event as dispatched."""
        self._state.dispatched[event_id] = dispatched_at
