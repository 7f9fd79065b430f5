# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-process event bus for claim and user notifications."""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class AppEvent(str, Enum):
    """Application events that handlers can subscribe to."""

    # User events
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
    USER_LOGIN = "user.login"
    USER_LOGOUT = "user.logout"

    # Claim events
    CLAIM_SUBMITTED = "claim.submitted"
    CLAIM_UPDATED = "claim.updated"
    CLAIM_STATUS_CHANGED = "claim.status_changed"

    # Document events
    DOCUMENT_UPLOADED = "document.uploaded"


@dataclass
class EventPayload:
    """Payload for an application event."""

    event_type: AppEvent
    timestamp: datetime
    data: dict[str, Any]


# Type alias for event handlers
EventHandler = Callable[[EventPayload], Any]


class EventBus:
    """Central event bus for application-wide events.

    Handlers never affect the publisher: a failing handler is logged and
    the remaining handlers still run.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[AppEvent, list[EventHandler]] = defaultdict(list)
        self._async_handlers: dict[AppEvent, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: AppEvent, handler: EventHandler) -> None:
        """Subscribe to an event.

        Args:
            event_type: Event type to subscribe to
            handler: Function to call when event fires (sync or async)
        """
        if asyncio.iscoroutinefunction(handler):
            self._async_handlers[event_type].append(handler)
        else:
            self._handlers[event_type].append(handler)

        logger.debug(f"Subscribed {handler!r} to event {event_type.value}")

    def unsubscribe(self, event_type: AppEvent, handler: EventHandler) -> None:
        """Unsubscribe a handler from an event."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
        if handler in self._async_handlers[event_type]:
            self._async_handlers[event_type].remove(handler)

    def clear(self) -> None:
        """Remove every subscription."""
        self._handlers.clear()
        self._async_handlers.clear()

    def _dispatch_sync(self, payload: EventPayload) -> None:
        for handler in self._handlers.get(payload.event_type, []):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in sync event handler for {payload.event_type.value}: {e}"
                )

    async def publish(self, event_type: AppEvent, data: dict[str, Any]) -> None:
        """Publish an event to all sync and async subscribers."""
        payload = EventPayload(
            event_type=event_type,
            timestamp=datetime.utcnow(),
            data=data,
        )

        self._dispatch_sync(payload)

        for handler in self._async_handlers.get(event_type, []):
            try:
                await handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in async event handler for {event_type.value}: {e}"
                )

    def publish_sync(self, event_type: AppEvent, data: dict[str, Any]) -> None:
        """Publish an event synchronously (sync handlers only).

        Use this when you need to publish from sync code and can't await.
        Note: Async handlers will NOT be called.
        """
        payload = EventPayload(
            event_type=event_type,
            timestamp=datetime.utcnow(),
            data=data,
        )

        self._dispatch_sync(payload)

        # Log warning if async handlers exist but weren't called
        if self._async_handlers.get(event_type):
            logger.warning(
                f"Event {event_type.value} has async handlers that were "
                "not called due to sync publish"
            )

    def get_subscriber_count(self, event_type: AppEvent) -> int:
        """Get the number of subscribers for an event type."""
        sync_count = len(self._handlers.get(event_type, []))
        async_count = len(self._async_handlers.get(event_type, []))
        return sync_count + async_count


# Global event bus singleton
event_bus = EventBus()
