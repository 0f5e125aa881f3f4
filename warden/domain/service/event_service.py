"""Event domain service."""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

import logfire

from warden.domain.model.event import BaseEvent, build_event
from warden.domain.repository.transaction import Transaction, TransactionManager
from warden.domain.value import EventName, UserId

from .base import Service
from .messaging import MessageChannel

EventListener = Callable[[BaseEvent], Awaitable[None]]

# Events that leave the process through the message channel
OUTBOUND_EVENTS = frozenset(
    {
        EventName.AUTH_LOCAL_CREATED,
        EventName.AUTH_LOCAL_PASSWORD_RESET,
    }
)


class EventBus:
    """In-process publish/subscribe keyed by event name."""

    def __init__(self) -> None:
        self._listeners: dict[EventName, list[EventListener]] = defaultdict(list)

    def subscribe(self, name: EventName, listener: EventListener) -> None:
        """Call ``listener`` for every emitted event named ``name``."""
        self._listeners[name].append(listener)

    async def emit(self, event: BaseEvent) -> None:
        """Call every listener of the event's name in subscription order."""
        for listener in self._listeners.get(event.event_name, []):
            await listener(event)


class OutboundEventForwarder:
    """Bus listener publishing outbound events to the message channel."""

    def __init__(self, channel: MessageChannel) -> None:
        self.channel = channel

    def register(self, bus: EventBus) -> None:
        """Subscribe to every outbound event on ``bus``."""
        for name in OUTBOUND_EVENTS:
            bus.subscribe(name, self)

    async def __call__(self, event: BaseEvent) -> None:
        with logfire.span("event_forwarder.publish", event_name=event.event_name.value):
            await self.channel.publish(event.event_name.value, event.model_dump(mode="json"))


class EventService(Service):
    """Records domain events and dispatches them after commit.

    Events are written through the transaction of the state change they
    describe. ``dispatch`` runs after that transaction commits; an event
    whose dispatch fails stays undispatched and is picked up again by
    ``dispatch_pending``.
    """

    def __init__(self, transaction_manager: TransactionManager, event_bus: EventBus) -> None:
        """Initialize event service.

        Args:
            transaction_manager: Transaction manager
            event_bus: In-process bus receiving dispatched events
        """
        self.transaction_manager = transaction_manager
        self.event_bus = event_bus

    def build_instance(
        self,
        name: EventName,
        user_id: UserId,
        model_id: UUID,
        metadata: Optional[dict[str, Any]] = None,
    ) -> BaseEvent:
        """Construct the event variant registered for ``name``.

        Raises:
            TypeError: If ``name`` is unknown or the payload does not fit
        """
        return build_event(name, user_id, model_id, metadata)

    async def create_event(
        self, event: Optional[BaseEvent], tx: Optional[Transaction] = None
    ) -> Optional[BaseEvent]:
        """Persist an event.

        Args:
            event: Event to persist (None is a no-op)
            tx: Transaction to write through; a new one is opened when omitted

        Returns:
            The persisted event, or None
        """
        if event is None:
            return None

        if tx is not None:
            return await tx.events.save(event)

        async with self.transaction_manager.transaction() as own_tx:
            return await own_tx.events.save(event)

    async def dispatch(self, event: BaseEvent) -> bool:
        """Emit a committed event on the bus and stamp it as dispatched.

        Dispatch is fire-and-forget for the caller: a failing listener is
        logged and the event is left for ``dispatch_pending``.

        Returns:
            True if the event was dispatched
        """
        with logfire.span(
            "event_service.dispatch", event_name=event.event_name.value, event_id=str(event.id)
        ):
            try:
                await self.event_bus.emit(event)
                async with self.transaction_manager.transaction() as tx:
                    await tx.events.mark_dispatched(event.id, datetime.now(timezone.utc))
            except Exception as e:
                logfire.error(
                    "Event dispatch failed",
                    event_name=event.event_name.value,
                    event_id=str(event.id),
                    error=str(e),
                )
                return False

            logfire.info("Event dispatched", event_name=event.event_name.value)
            return True

    async def dispatch_pending(self, limit: int = 100) -> int:
        """Re-dispatch events that never left the process.

        Returns:
            Number of events dispatched
        """
        with logfire.span("event_service.dispatch_pending"):
            async with self.transaction_manager.transaction() as tx:
                pending = await tx.events.find_undispatched(set(EventName), limit)

            dispatched = 0
            for event in pending:
                if await self.dispatch(event):
                    dispatched += 1

            if pending:
                logfire.info("Relayed pending events", pending=len(pending), dispatched=dispatched)
            return dispatched
