"""Typed contracts for content events."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

VERSION_CREATED = "version-created"
VERSIONS_PURGED = "versions-purged"
RELEASE_CREATED = "release-created"


class EventEnvelope(BaseModel):
    """Canonical event envelope used on Service Bus."""

    event: str
    data: dict[str, Any]

    @classmethod
    def from_message_body(cls, body: str) -> EventEnvelope:
        """Parse an event envelope from a JSON message body."""
        return cls.model_validate(json.loads(body))
