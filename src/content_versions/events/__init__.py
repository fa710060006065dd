"""Event contracts and publishing interfaces for content change notifications."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from content_versions.events.contracts import (
    RELEASE_CREATED,
    VERSION_CREATED,
    VERSIONS_PURGED,
    EventEnvelope,
)
from content_versions.events.servicebus import ServiceBusPublisher


@runtime_checkable
class EventPublisher(Protocol):
    """Protocol for publishing content events to connected consumers."""

    async def publish(self, event_type: str, data: dict[str, Any]) -> None:
        """Broadcast an event to all connected consumers."""
        ...


class NullPublisher:
    """Publisher that drops every event."""

    async def publish(self, event_type: str, data: dict[str, Any]) -> None:
        return None


__all__ = [
    "RELEASE_CREATED",
    "VERSIONS_PURGED",
    "VERSION_CREATED",
    "EventEnvelope",
    "EventPublisher",
    "NullPublisher",
    "ServiceBusPublisher",
]
