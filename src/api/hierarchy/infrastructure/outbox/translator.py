"""Hierarchy-specific translator from domain events to change messages.

Each message names the changed tenant as its subject and lists every
other tenant whose derived state depends on the change as additional
subjects.
"""

from __future__ import annotations

from typing import Any, get_args

from hierarchy.domain.events import (
    DomainEvent,
    TenantCreated,
    TenantDeleted,
    TenantUpdated,
)
from shared_kernel.outbox.value_objects import ChangeEventType, ChangeMessage

# Derive supported events from the DomainEvent type alias
_SUPPORTED_EVENTS: frozenset[str] = frozenset(
    cls.__name__ for cls in get_args(DomainEvent)
)


class TenantChangeTranslator:
    """Translates hierarchy domain events to change messages."""

    def __init__(self, source: str):
        """Initialize the translator.

        Args:
            source: Name of the emitting service, carried by every message
        """
        self._source = source

    def supported_event_types(self) -> frozenset[str]:
        """Return the event type names this translator handles."""
        return _SUPPORTED_EVENTS

    def translate(self, event: DomainEvent) -> ChangeMessage:
        """Convert a domain event to a change message.

        Raises:
            ValueError: If the event type is not supported
        """
        match event:
            case TenantCreated():
                return self._message(
                    event,
                    ChangeEventType.CREATE,
                    additional_subject_ids=event.ancestor_ids,
                    subject_fields={
                        "name": event.name,
                        "parent_tenant_id": event.parent_tenant_id,
                    },
                )
            case TenantUpdated():
                return self._message(
                    event,
                    ChangeEventType.UPDATE,
                    subject_fields={
                        "name": event.name,
                        "description": event.description,
                        "changed_fields": list(event.changed_fields),
                    },
                )
            case TenantDeleted():
                return self._message(
                    event,
                    ChangeEventType.DELETE,
                    subject_fields={
                        "name": event.name,
                        "parent_tenant_id": event.parent_tenant_id,
                    },
                )
            case _:
                raise ValueError(f"Unknown event type: {type(event).__name__}")

    def _message(
        self,
        event: DomainEvent,
        event_type: ChangeEventType,
        subject_fields: dict[str, Any],
        additional_subject_ids: tuple[str, ...] = (),
    ) -> ChangeMessage:
        return ChangeMessage(
            subject_id=event.tenant_id,
            event_type=event_type,
            timestamp=event.occurred_at,
            additional_subject_ids=additional_subject_ids,
            actor_id=event.actor_id,
            source=self._source,
            subject_fields=subject_fields,
        )
