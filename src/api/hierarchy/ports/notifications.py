"""Port for turning committed domain events into change messages."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hierarchy.domain.events import DomainEvent
from shared_kernel.outbox.value_objects import ChangeMessage

TENANT_AGGREGATE_TYPE = "tenant"


@runtime_checkable
class ITenantChangeTranslator(Protocol):
    """Translates hierarchy domain events into change messages."""

    def translate(self, event: DomainEvent) -> ChangeMessage:
        """Build the change message describing one event.

        Raises:
            ValueError: If the event type is not supported
        """
        ...
