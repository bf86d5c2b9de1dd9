"""In-process event channel for live dashboard updates."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from .schema import DashboardModel

logger = logging.getLogger(__name__)


class DashboardEvent(DashboardModel):
    """A change pushed to connected clients."""

    type: str = Field(..., description="Event name, e.g. time_session.started")
    data: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[DashboardEvent], None]


class EventBroadcaster:
    """Fire-and-forget publisher.

    Subscribers are called synchronously in subscription order. An exception
    raised by one subscriber is logged and does not stop delivery to the
    others, nor reach the publisher.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber and return a function that removes it."""
        self._subscribers.append(subscriber)
        return lambda: self.unsubscribe(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> None:
        if subscriber in self._subscribers:
            self._subscribers.remove(subscriber)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(
        self, event_type: str, data: dict[str, Any] | None = None
    ) -> DashboardEvent:
        event = DashboardEvent(type=event_type, data=data or {})
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Subscriber failed for event {event_type}: {e}")
        logger.debug(
            f"Published {event_type} to {len(self._subscribers)} subscribers"
        )
        return event
