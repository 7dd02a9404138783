"""Value objects for change notifications and the outbox pattern.

Value objects are immutable descriptors that provide type safety and
domain semantics for change messages and outbox entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID


class ChangeEventType(StrEnum):
    """Kind of mutation a change message reports."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def format_subject(prefix: str, aggregate_type: str, event_type: str) -> str:
    """Build the subject a change message is routed to.

    Subjects follow ``<prefix>.<aggregate_type>s.<event_type>.global``.

    Args:
        prefix: Dotted subject prefix (e.g., "com.infratographer.events")
        aggregate_type: Singular aggregate name (e.g., "tenant")
        event_type: Change event type (e.g., "create")

    Returns:
        Subject string, e.g. "com.infratographer.events.tenants.create.global"
    """
    return f"{prefix}.{aggregate_type}s.{event_type}.global"


@dataclass(frozen=True)
class ChangeMessage:
    """Outbound notification describing one committed mutation.

    Consumers (authorization caches, billing, provisioning) scope their
    invalidation from ``subject_id`` plus ``additional_subject_ids``.

    Attributes:
        subject_id: Id of the entity the change is principally about
        event_type: Kind of change
        additional_subject_ids: Structurally related entity ids to invalidate
        actor_id: Identity that performed the change (None when unauthenticated)
        source: Name of the producing service
        timestamp: When the change occurred (UTC)
        subject_fields: Descriptive fields of the subject at change time
    """

    subject_id: str
    event_type: ChangeEventType
    timestamp: datetime
    additional_subject_ids: tuple[str, ...] = ()
    actor_id: str | None = None
    source: str = ""
    subject_fields: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Convert the message to its JSON wire representation."""
        payload: dict[str, Any] = {
            "subjectID": self.subject_id,
            "eventType": self.event_type.value,
            "additionalSubjects": list(self.additional_subject_ids),
            "source": self.source,
            "timestamp": self.timestamp.isoformat(),
            "subjectFields": dict(self.subject_fields),
        }
        if self.actor_id is not None:
            payload["actorID"] = self.actor_id
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ChangeMessage:
        """Reconstruct a message from its JSON wire representation.

        Raises:
            ValueError: If the event type is unknown or a required key is missing
        """
        try:
            return cls(
                subject_id=payload["subjectID"],
                event_type=ChangeEventType(payload["eventType"]),
                timestamp=datetime.fromisoformat(payload["timestamp"]),
                additional_subject_ids=tuple(payload.get("additionalSubjects", ())),
                actor_id=payload.get("actorID"),
                source=payload.get("source", ""),
                subject_fields=dict(payload.get("subjectFields", {})),
            )
        except KeyError as e:
            raise ValueError(f"Change message payload is missing {e}") from e


@dataclass(frozen=True)
class OutboxEntry:
    """Represents a single entry in the outbox table.

    This is an immutable value object that captures the state of an outbox
    entry as it exists in the database. It contains all the information
    needed to hand the entry to the message transport.

    Attributes:
        id: Unique identifier for the entry (UUID)
        aggregate_type: Type of aggregate that changed (e.g., "tenant")
        aggregate_id: Id of the aggregate
        event_type: Change event type (e.g., "delete")
        payload: Change message in its wire representation
        occurred_at: When the change occurred
        processed_at: When the entry was delivered (None if undelivered)
        created_at: When the entry was created in the outbox
        retry_count: Number of failed delivery attempts
        last_error: The most recent delivery error (if any)
        failed_at: When the entry was moved to DLQ (None if not failed)
    """

    id: UUID
    aggregate_type: str
    aggregate_id: str
    event_type: str
    payload: dict[str, Any]
    occurred_at: datetime
    processed_at: datetime | None
    created_at: datetime
    retry_count: int = 0
    last_error: str | None = None
    failed_at: datetime | None = None

    @property
    def is_processed(self) -> bool:
        """Check if this entry has been delivered."""
        return self.processed_at is not None

    @property
    def is_failed(self) -> bool:
        """Check if this entry has been moved to the DLQ."""
        return self.failed_at is not None
