"""PostgreSQL implementation of Event repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import BaseEvent
from warden.domain.repository import EventRepository
from warden.domain.value import EventId, EventName
from warden.persistence.mappers import event_to_dict, row_to_event
from warden.persistence.tables import events_table


class PostgresEventRepository(EventRepository):
    """PostgreSQL implementation of EventRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def save(self, event: BaseEvent) -> BaseEvent:
        """Append an event."""
        await self.session.execute(events_table.insert().values(**event_to_dict(event)))
        await self.session.flush()
        return event

    async def find_by_model_id(self, model_id: UUID) -> list[BaseEvent]:
        """Get all events concerning a record, oldest first."""
        stmt = (
            select(events_table)
            .where(events_table.c.model_id == model_id)
            .order_by(events_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_event(dict(row)) for row in result.mappings().all()]

    async def find_undispatched(
        self, names: set[EventName], limit: int = 100
    ) -> list[BaseEvent]:
        """Get events never dispatched, oldest first."""
        stmt = (
            select(events_table)
            .where(events_table.c.dispatched_at.is_(None))
            .where(events_table.c.name.in_([name.value for name in names]))
            .order_by(events_table.c.created_at)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [row_to_event(dict(row)) for row in result.mappings().all()]

    async def mark_dispatched(self, event_id: EventId, dispatched_at: datetime) -> None:
        """Stamp an event as dispatched."""
        stmt = (
            events_table.update()
            .where(events_table.c.id == event_id)
            .values(dispatched_at=dispatched_at)
        )
        await self.session.execute(stmt)
        await self.session.flush()
