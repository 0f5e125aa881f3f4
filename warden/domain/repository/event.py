"""Event repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from warden.domain.model.event import BaseEvent
from warden.domain.value import EventId, EventName


class EventRepository(ABC):
    """Append-only store of domain events.

    Rows are never mutated apart from the dispatch stamp that records when
    the event left the process.
    """

    @abstractmethod
    async def save(self, event: BaseEvent) -> BaseEvent:
        """Append an event.

        Args:
            event: The event to append

        Returns:
            The appended event
        """
        pass

    @abstractmethod
    async def find_by_model_id(self, model_id: UUID) -> list[BaseEvent]:
        """Get all events concerning a record, oldest first.

        Args:
            model_id: The record the events concern

        Returns:
            List of events (may be empty)
        """
        pass

    @abstractmethod
    async def find_undispatched(
        self, names: set[EventName], limit: int = 100
    ) -> list[BaseEvent]:
        """Get events that were never dispatched, oldest first.

        Args:
            names: Only return events with these names
            limit: Maximum number of events

        Returns:
            List of events (may be empty)
        """
        pass

    @abstractmethod
    async def mark_dispatched(self, event_id: EventId, dispatched_at: datetime) -> None:
        """Stamp an event as dispatched.

        Args:
            event_id: The event to stamp
            dispatched_at: Dispatch time
        """
        pass
